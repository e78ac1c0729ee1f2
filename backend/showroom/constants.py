# Overview: Enumerated tags and business constants shared by the ledger services.

CATEGORIES = ("Shirt", "Pant", "Saree", "T-Shirt", "Jacket")
SIZES = ("S", "M", "L", "XL", "XXL", "Free Size")
COLORS = ("Red", "Blue", "Green", "Black", "White", "Yellow", "Pink")

PAYMENT_CASH = "Cash"
PAYMENT_BKASH = "Bkash"
PAYMENT_CARD = "Card"
PAYMENT_DUE = "Due"
PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_BKASH, PAYMENT_CARD, PAYMENT_DUE)

STATUS_PAID = "Paid"
STATUS_DUE = "Due"
PAYMENT_STATUSES = (STATUS_PAID, STATUS_DUE)

TIER_BRONZE = "Bronze"
TIER_SILVER = "Silver"
TIER_GOLD = "Gold"
LOYALTY_TIERS = (TIER_BRONZE, TIER_SILVER, TIER_GOLD)

MOVEMENT_PURCHASE = "Purchase"
MOVEMENT_SALE = "Sale"
MOVEMENT_TYPES = (MOVEMENT_PURCHASE, MOVEMENT_SALE)

STOCK_OUT = "Out of Stock"
STOCK_LOW = "Low Stock"
STOCK_IN = "In Stock"
STOCK_STATUSES = (STOCK_OUT, STOCK_LOW, STOCK_IN)

# One loyalty point per 100 currency units spent (amounts are in cents)
LOYALTY_CENTS_PER_POINT = 100 * 100

# Document sequences: (sequence key, prefix, zero-pad width)
SEQ_PRODUCT = ("PRODUCT", "PROD", 3)
SEQ_CUSTOMER = ("CUSTOMER", "CUST", 3)
SEQ_SUPPLIER = ("SUPPLIER", "SUP", 3)
SEQ_INVOICE = ("INVOICE", "INV", 4)
SEQ_STOCK_MOVEMENT = ("STOCK_MOVEMENT", "SM", 6)
SEQ_SUPPLIER_PAYMENT = ("SUPPLIER_PAYMENT", "PAY", 5)

# Company logo limits (decoded bytes; display box in pixels)
LOGO_MAX_BYTES = 2 * 1024 * 1024
LOGO_MAX_WIDTH = 400
LOGO_MAX_HEIGHT = 200
LOGO_JPEG_QUALITY = 85
