SCHEMA_SQL = r"""
-- Standing inventory definitions (not a movement ledger)
CREATE TABLE IF NOT EXISTS stock (
  id TEXT PRIMARY KEY,
  product_name TEXT NOT NULL,
  product_type TEXT NOT NULL,
  product_weight_grams REAL NOT NULL DEFAULT 0,   -- per unit
  quantity_available INTEGER NOT NULL DEFAULT 0,
  created_at TEXT NOT NULL,                       -- ISO datetime (UTC)
  updated_at TEXT NOT NULL
);

-- Sales (balance_amount is stored, kept equal to amount - given_amount on write)
CREATE TABLE IF NOT EXISTS sales (
  id TEXT PRIMARY KEY,
  product_name TEXT NOT NULL,
  product_type TEXT NOT NULL,
  product_weight_grams REAL,
  quantity INTEGER NOT NULL DEFAULT 1,
  buyer_name TEXT NOT NULL,
  amount REAL NOT NULL,
  given_amount REAL,
  balance_amount REAL,
  sale_date TEXT NOT NULL,                        -- ISO date
  notes TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);

-- Purchases (inbound acquisitions; not applied to stock automatically)
CREATE TABLE IF NOT EXISTS purchases (
  id TEXT PRIMARY KEY,
  product_name TEXT NOT NULL,
  product_type TEXT NOT NULL,
  product_weight_grams REAL NOT NULL DEFAULT 0,
  quantity INTEGER NOT NULL DEFAULT 1,
  buyer_name TEXT NOT NULL,
  amount REAL NOT NULL,
  purchase_date TEXT NOT NULL,
  notes TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);

-- Goods left with a customer (credit / consignment)
CREATE TABLE IF NOT EXISTS leave_amounts (
  id TEXT PRIMARY KEY,
  product_name TEXT NOT NULL,
  product_type TEXT NOT NULL,
  product_weight_grams REAL NOT NULL DEFAULT 0,
  quantity INTEGER NOT NULL DEFAULT 1,
  buyer_name TEXT NOT NULL,
  amount REAL NOT NULL,
  leave_date TEXT NOT NULL,
  notes TEXT,
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);

-- Maintenance windows
CREATE TABLE IF NOT EXISTS stock_maintenance (
  id TEXT PRIMARY KEY,
  start_date TEXT NOT NULL,
  end_date TEXT NOT NULL,
  description TEXT,
  status TEXT NOT NULL DEFAULT 'scheduled',       -- scheduled / in_progress / completed
  created_at TEXT NOT NULL,
  updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_sales_sale_date ON sales(sale_date);
CREATE INDEX IF NOT EXISTS idx_purchases_purchase_date ON purchases(purchase_date);
CREATE INDEX IF NOT EXISTS idx_leave_amounts_leave_date ON leave_amounts(leave_date);
"""

# Writable columns per collection (id / created_at / updated_at are assigned by the gateway).
COLLECTIONS: dict[str, tuple[str, ...]] = {
    "stock": ("product_name", "product_type", "product_weight_grams", "quantity_available"),
    "sales": (
        "product_name",
        "product_type",
        "product_weight_grams",
        "quantity",
        "buyer_name",
        "amount",
        "given_amount",
        "balance_amount",
        "sale_date",
        "notes",
    ),
    "purchases": (
        "product_name",
        "product_type",
        "product_weight_grams",
        "quantity",
        "buyer_name",
        "amount",
        "purchase_date",
        "notes",
    ),
    "leave_amounts": (
        "product_name",
        "product_type",
        "product_weight_grams",
        "quantity",
        "buyer_name",
        "amount",
        "leave_date",
        "notes",
    ),
    "stock_maintenance": ("start_date", "end_date", "description", "status"),
}

SYSTEM_COLUMNS = ("id", "created_at", "updated_at")

# Calendar-date column each collection defaults to today on insert.
DATE_DEFAULTS = {
    "sales": "sale_date",
    "purchases": "purchase_date",
    "leave_amounts": "leave_date",
}

PRODUCT_TYPES = ["Ring", "Necklace", "Earring", "Bracelet", "Pendant", "Chain", "Bangle", "Anklet"]

MAINTENANCE_STATUSES = ("scheduled", "in_progress", "completed")
