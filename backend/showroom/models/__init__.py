from .catalog import ProductRecord, CustomerRecord, SupplierRecord
from .ledger import SaleRecord, SaleItemRecord, StockMovementRecord, SupplierPaymentRecord, DocumentSequence
from .settings import CompanySetting

__all__ = [
    'ProductRecord', 'CustomerRecord', 'SupplierRecord',
    'SaleRecord', 'SaleItemRecord', 'StockMovementRecord', 'SupplierPaymentRecord',
    'DocumentSequence',
    'CompanySetting',
]
