# ==============================================================================
# WSGI entry point - gunicorn / production
# ==============================================================================
# Usage:
#   gunicorn wsgi:app --bind 0.0.0.0:$PORT
#
# Project layout:
#   repo_root/           <- working directory (on sys.path automatically)
#   ├── wsgi.py          <- this file
#   ├── pyproject.toml
#   └── kasir_pos/       <- Python package
#       ├── main.py
#       ├── services/
#       └── repositories/
# ==============================================================================

from kasir_pos.main import create_app

app = create_app()

# Local development:
#   python wsgi.py
if __name__ == '__main__':
    app.run(debug=True, host='0.0.0.0', port=5000)
