ROLE_ADMIN = "admin"
ROLE_LEADER = "leader"
ROLE_PROMOTER = "promoter"
ROLE_REPOSITOR = "repositor"

ROLES = (ROLE_ADMIN, ROLE_LEADER, ROLE_PROMOTER, ROLE_REPOSITOR)
STORE_STAFF_ROLES = (ROLE_PROMOTER, ROLE_REPOSITOR)

CHANGE_INSERT = "insert"
CHANGE_UPDATE = "update"
CHANGE_DELETE = "delete"
CHANGE_TYPES = (CHANGE_INSERT, CHANGE_UPDATE, CHANGE_DELETE)

ACTIVITY_STORE_CREATE = "store_create"
ACTIVITY_STORE_UPDATE = "store_update"
ACTIVITY_STORE_DELETE = "store_delete"
ACTIVITY_USER_CREATE = "user_create"
ACTIVITY_PRODUCT_CREATE = "product_create"
ACTIVITY_PRODUCT_IMPORT = "product_import"
ACTIVITY_STOCK_UPDATE = "stock_update"
ACTIVITY_TYPES = (
    ACTIVITY_STORE_CREATE,
    ACTIVITY_STORE_UPDATE,
    ACTIVITY_STORE_DELETE,
    ACTIVITY_USER_CREATE,
    ACTIVITY_PRODUCT_CREATE,
    ACTIVITY_PRODUCT_IMPORT,
    ACTIVITY_STOCK_UPDATE,
)

MIN_EAN_LENGTH = 8

# Integer columns are 32-bit on PostgreSQL.
MAX_DB_INT = 2_147_483_647
MIN_DB_INT = -2_147_483_648
