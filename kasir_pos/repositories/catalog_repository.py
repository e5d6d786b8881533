# ==============================================================================
# CATALOG REPOSITORY
# ==============================================================================
# In-memory product catalog. Products are immutable reference data;
# this repository only reads them.
# ==============================================================================

from typing import Dict, Iterable, List, Optional

from kasir_pos.models import Product
from kasir_pos.repositories.demo_data import DEMO_PRODUCTS


class CatalogRepository:
    """
    Product catalog keyed by product id, in insertion order.

    Barcodes must be unique when present.
    """

    def __init__(self, products: Iterable[Product] = DEMO_PRODUCTS):
        """
        Loads the catalog.

        Args:
            products: Products to serve (defaults to the demo catalog)

        Raises:
            ValueError: on a duplicated id or barcode
        """
        self._products: Dict[str, Product] = {}
        barcodes = set()
        for product in products:
            if product.id in self._products:
                raise ValueError(f'Duplicated product id: {product.id}')
            if product.barcode:
                if product.barcode in barcodes:
                    raise ValueError(f'Duplicated barcode: {product.barcode}')
                barcodes.add(product.barcode)
            self._products[product.id] = product

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Gets a product by id.

        Args:
            product_id: Product id

        Returns:
            The product or None
        """
        if product_id is None:
            return None
        return self._products.get(str(product_id))

    def search(self, text: str = '') -> List[Product]:
        """
        Searches products by name (case-insensitive) or barcode.

        Args:
            text: Search text; empty returns everything

        Returns:
            Matching products in catalog order
        """
        return [p for p in self._products.values() if p.matches(text)]
