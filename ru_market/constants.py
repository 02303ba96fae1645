CATEGORY_NAME_MAX_LENGTCH = 50
CATEGORY_SLUG_ALL = 'all'
# Статичный список категорий для панели фильтра: (название, slug)
CATEGORY_CHOICES = (
    ('All', 'all'),
    ('Mobile', 'mobile'),
    ('Laptop', 'laptop'),
    ('Tablet', 'tablet'),
    ('Desktop', 'desktop'),
    ('Camera', 'camera'),
    ('Headphone', 'headphone'),
    ('Smart Watch', 'smart-watch'),
    ('Refrigerator', 'refrigerator'),
    ('Furniture', 'furniture'),
    ('Cycle', 'cycle'),
    ('Book', 'book'),
    ('Stationery', 'stationery'),
    ('Sports Item', 'sports-item'),
    ('Kitchen Item', 'kitchen-item'),
    ('Beauty Product', 'beauty-product'),
    ('Home Decor', 'home-decor'),
    ('Electronics', 'electronics'),
)

PRODUCT_TITLE_MIN_LENGTCH = 1
PRODUCT_TITLE_MAX_LENGTCH = 120
PRODUCT_DESCRIPTION_MAX_LENGTCH = 2000
PRODUCT_MIN_PRICE = 0
PRODUCT_PRICE_MAX_DIGITS = 10
PRODUCT_PRICE_DECIMAL_PLACES = 2
PRODUCT_MAX_LENGTH_IMAGE_URL = 1000
PRODUCT_CONDITIONS = ('new', 'like-new', 'good', 'fair')
PRODUCT_STATUS_AVAILABLE = 'available'
PRODUCT_STATUS_SOLD = 'sold'
PRODUCT_STATUS_LENGTH_MAX = 20
PRODUCT_HOME_LIMIT = 8
PRODUCT_ROUTER_MIN_SIZE = 1
PRODUCT_ROUTER_MAX_SIZE = 100

PROFILE_FULL_NAME_MAX_LENGTH = 100
PROFILE_PHONE_MAX_LENGTH = 20
PROFILE_UNKNOWN_NAME = 'Unknown'

REVIEW_COMMENT_MIN_LENGTH = 1
REVIEW_COMMENT_MAX_LENGTH = 1000
REVIEW_GRADE_MIN_VALUE = 1
REVIEW_GRADE_MAX_VALUE = 5
REVIEW_GRADE_DEFAULT_VALUE = 5

TOKEN_DICT_KEY_SUBJECT = 'sub'
TOKEN_DICT_KEY_EMAIL = 'email'
TOKEN_DICT_KEY_EXPIRE = 'exp'

SESSION_EVENT_SIGNED_IN = 'SIGNED_IN'
SESSION_EVENT_SIGNED_OUT = 'SIGNED_OUT'

CACHE_KIND_PRODUCT = 'product'
CACHE_KIND_PROFILE = 'profile'
CACHE_KIND_CATEGORIES = 'categories'

# :::МАРШРУТЫ КЛИЕНТА:::
ROUTE_HOME = '/'
ROUTE_MARKETPLACE = '/marketplace'
ROUTE_PRODUCT = '/product/{product_id}'
ROUTE_ADD_PRODUCT = '/add-product'
ROUTE_PROFILE = '/profile'
ROUTE_REVIEWS = '/reviews'
ROUTE_ABOUT = '/about'
ROUTE_AUTH = '/auth'

# :::СООБЩЕНИЯ ПОЛЬЗОВАТЕЛЮ:::
MESSAGE_WELCOME = 'Welcome to RU Market'
MESSAGE_NO_PRODUCTS_YET = 'No products available yet'
MESSAGE_NO_PRODUCTS_FOUND = 'No products found'
MESSAGE_PRODUCT_NOT_FOUND = 'Product not found'
MESSAGE_PRODUCT_LOAD_FAILED = 'Failed to load product'
MESSAGE_CATEGORY_NOT_FOUND = 'Category not found'
MESSAGE_PRODUCT_LISTED = 'Product listed successfully!'
MESSAGE_PRODUCT_ADD_FAILED = 'Failed to add product'
MESSAGE_PRODUCT_UPDATED = 'Product updated successfully!'
MESSAGE_PRODUCT_UPDATE_FAILED = 'Failed to update product.'
MESSAGE_PRODUCT_SOLD = 'Product marked as sold'
MESSAGE_PRODUCT_DELETED = 'Product deleted successfully'
MESSAGE_PRODUCT_DELETE_FAILED = 'Failed to delete product'
MESSAGE_DELETE_NOT_CONFIRMED = 'Are you sure you want to delete this product?'
MESSAGE_ONLY_OWNER_UPDATE = 'You can only update your own products'
MESSAGE_ONLY_OWNER_DELETE = 'You can only delete your own products'
MESSAGE_IMAGE_UPLOAD_FAILED = 'Failed to upload image'
MESSAGE_SIGN_IN_REQUIRED = 'Please sign in to continue'
MESSAGE_SIGN_IN_TO_ADD = 'Please sign in to add products'
MESSAGE_SIGN_IN_TO_REVIEW = 'Please login to submit a review'
MESSAGE_SESSION_EXPIRED = 'Session has expired'
MESSAGE_SESSION_INVALID = 'Could not validate session'
MESSAGE_SIGNED_OUT = 'Signed out'
MESSAGE_SIGN_OUT_FAILED = 'Failed to sign out'
MESSAGE_NO_OWN_PRODUCTS = "You haven't listed any products yet"
MESSAGE_PROFILE_UPDATED = 'Profile updated successfully'
MESSAGE_PROFILE_UPDATE_FAILED = 'Failed to update profile'
MESSAGE_PROFILE_LOAD_FAILED = 'Failed to load profile'
MESSAGE_BACKEND_UNAVAILABLE = 'Service is temporarily unavailable'
MESSAGE_INTERNAL_ERROR = 'Internal server error'
MESSAGE_REVIEWS_LOAD_FAILED = 'Failed to load reviews'
MESSAGE_NO_REVIEWS = 'No reviews yet. Be the first to share your experience!'
MESSAGE_REVIEW_SUBMITTED = 'Review submitted successfully!'
MESSAGE_REVIEW_FAILED = 'Failed to submit review'

ABOUT_TITLE = 'About RU Market'
ABOUT_TEXT = (
    'RU Market is a student-centered marketplace designed exclusively for '
    'the Rajshahi University community. We provide a safe, convenient '
    'platform where students can buy and sell used items, making student '
    'life more affordable and sustainable.',
    'From electronics and books to furniture and sports equipment, our '
    'platform helps students find great deals while reducing waste through '
    'the reuse of quality items.',
)
