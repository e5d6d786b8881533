# ==============================================================================
# DOMAIN ENTITIES - dataclass definitions
# ==============================================================================
# Each entity represents one business concept of the shop.
# They are independent of the storage mechanism and of the HTTP layer;
# to_dict() produces JSON-ready structures for the API.
# ==============================================================================

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from kasir_pos.exceptions import InvalidQuantity


# ==============================================================================
# ENUMERATIONS
# ==============================================================================

class UserRole(str, Enum):
    """Roles available in the shop."""
    CASHIER = "cashier"
    OWNER = "owner"


class PaymentMethod(str, Enum):
    """Accepted payment methods."""
    CASH = "cash"
    NON_CASH = "non-cash"
    QRIS = "qris"
    DEBT = "debt"


class StockStatus(str, Enum):
    """Stock health of a product, in total pieces against min_stock."""
    LOW = "Low"
    MEDIUM = "Medium"
    GOOD = "Good"


class AuditType(str, Enum):
    """Audit event categories."""
    SESSION = "SESSION"
    SALE = "SALE"
    STOCK = "STOCK"


def amount_to_json(value: Any) -> Any:
    """Decimal amounts become int when whole, float otherwise."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


# ==============================================================================
# USERS AND SESSIONS
# ==============================================================================

@dataclass(frozen=True)
class Account:
    """
    Registry entry used by the session guard.

    Attributes:
        user_id: Stable user identifier
        name: Display name
        role: Role copied into the session
        email: Login identifier (matched case-insensitively)
        secret: Plain demo secret or a werkzeug password hash
        phone: Optional phone number
    """
    user_id: str
    name: str
    role: UserRole
    email: str
    secret: str = field(repr=False)
    phone: Optional[str] = None


@dataclass(frozen=True)
class Session:
    """
    Logged-in user. Never contains the secret.

    Attributes:
        user_id: User identifier
        name: Display name
        role: cashier or owner
        email: Optional email
        phone: Optional phone
        token: Random id of this login; two logins of the same account
            get different tokens
    """
    user_id: str
    name: str
    role: UserRole
    email: Optional[str] = None
    phone: Optional[str] = None
    token: Optional[str] = field(default=None, repr=False)

    @property
    def is_owner(self) -> bool:
        return self.role == UserRole.OWNER

    @property
    def cart_key(self) -> str:
        """Key of the cart owned by this login."""
        return self.token or self.user_id

    @property
    def dashboard(self) -> str:
        """Home screen for this role."""
        return 'owner-dashboard' if self.is_owner else 'cashier-dashboard'

    def to_dict(self) -> Dict[str, Any]:
        """Serialized form kept in the session store."""
        data = {
            'id': self.user_id,
            'name': self.name,
            'role': self.role.value,
        }
        if self.email is not None:
            data['email'] = self.email
        if self.phone is not None:
            data['phone'] = self.phone
        if self.token is not None:
            data['token'] = self.token
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Session':
        """
        Rebuilds a session from its stored form.

        Raises:
            KeyError, ValueError, TypeError: if the stored value is malformed
        """
        return cls(
            user_id=str(data['id']),
            name=str(data['name']),
            role=UserRole(data['role']),
            email=data.get('email'),
            phone=data.get('phone'),
            token=data.get('token'),
        )


# ==============================================================================
# CATALOG
# ==============================================================================

@dataclass(frozen=True)
class Product:
    """
    Catalog reference data. Price is in whole Rupiah.
    """
    id: str
    name: str
    price: int
    barcode: Optional[str] = None
    stock: int = 0
    category: Optional[str] = None

    def matches(self, text: str) -> bool:
        """Case-insensitive name match or barcode substring."""
        query = (text or '').strip()
        if not query:
            return True
        if query.lower() in self.name.lower():
            return True
        return bool(self.barcode) and query in self.barcode

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'price': self.price,
            'barcode': self.barcode,
            'stock': self.stock,
            'category': self.category,
        }


# ==============================================================================
# CART
# ==============================================================================

@dataclass
class CartLine:
    """
    One product in the cart.

    The unit price is captured when the line is created and never
    re-read from the catalog, so the total cannot drift mid-sale.
    """
    product_id: str
    name: str
    unit_price: int
    quantity: int = 1

    @property
    def subtotal(self) -> int:
        return self.quantity * self.unit_price

    def copy(self) -> 'CartLine':
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'name': self.name,
            'unit_price': self.unit_price,
            'quantity': self.quantity,
            'subtotal': self.subtotal,
        }


@dataclass
class Cart:
    """Insertion-ordered lines keyed by product id."""
    lines: Dict[str, CartLine] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(line.subtotal for line in self.lines.values())

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines.values())

    def is_empty(self) -> bool:
        return not self.lines


@dataclass
class PaymentSelection:
    """Active payment method and the cash handed over."""
    method: PaymentMethod = PaymentMethod.CASH
    tendered: Decimal = Decimal('0')


@dataclass(frozen=True)
class CheckoutReceipt:
    """
    Snapshot of a completed sale. The ledger keeps no history; storing
    this is up to the caller.
    """
    lines: Tuple[CartLine, ...]
    total: int
    method: PaymentMethod
    tendered: Decimal
    change_due: Optional[Decimal]
    completed_at: datetime
    cashier_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'lines': [line.to_dict() for line in self.lines],
            'total': self.total,
            'method': self.method.value,
            'tendered': amount_to_json(self.tendered),
            'change_due': amount_to_json(self.change_due),
            'completed_at': self.completed_at.isoformat(),
            'cashier_id': self.cashier_id,
        }


# ==============================================================================
# STOCK
# ==============================================================================

@dataclass
class StockRecord:
    """
    Inventory of one product, held in boxes and loose pieces.

    Attributes:
        product_id: SKU
        name: Product name (searchable)
        category: Category used by the category filter
        barcode: Barcode (searchable)
        box_stock: Unopened boxes
        piece_stock: Loose pieces
        pieces_per_box: Fixed conversion ratio
        min_stock: Low-stock threshold, in pieces
    """
    product_id: str
    name: str
    category: str = ''
    barcode: str = ''
    box_stock: int = 0
    piece_stock: int = 0
    pieces_per_box: int = 1
    min_stock: int = 0

    def __post_init__(self):
        for attr in ('box_stock', 'piece_stock', 'min_stock'):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise InvalidQuantity(value, f'{attr} must be an integer >= 0')
        ratio = self.pieces_per_box
        if isinstance(ratio, bool) or not isinstance(ratio, int) or ratio <= 0:
            raise InvalidQuantity(ratio, 'pieces_per_box must be an integer > 0')

    @property
    def total_pieces(self) -> int:
        return self.piece_stock + self.box_stock * self.pieces_per_box

    def copy(self) -> 'StockRecord':
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'name': self.name,
            'category': self.category,
            'barcode': self.barcode,
            'box_stock': self.box_stock,
            'piece_stock': self.piece_stock,
            'pieces_per_box': self.pieces_per_box,
            'min_stock': self.min_stock,
            'total_pieces': self.total_pieces,
        }


# ==============================================================================
# AUDIT
# ==============================================================================

@dataclass
class AuditLog:
    """One audit event, newest first in the repository."""
    type: str
    user: str
    message: str
    timestamp: str
    related_id: str = ''
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.type,
            'user': self.user,
            'message': self.message,
            'timestamp': self.timestamp,
            'related_id': self.related_id,
            'details': self.details,
        }
