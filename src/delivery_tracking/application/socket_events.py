"""Socket.IO event names used by the backend namespaces."""

# /orders namespace
JOIN_ORDER = "joinOrder"
LEAVE_ORDER = "leaveOrder"

# /tracking namespace
SUBSCRIBE_TO_ORDER = "subscribeToOrder"
UNSUBSCRIBE_FROM_ORDER = "unsubscribeFromOrder"
GET_ORDER_TRACKING = "getOrderTracking"
DRIVER_LOCATION = "driverLocation"
ORDER_TRACKING = "orderTracking"
DRIVER_ARRIVED = "driverArrived"

# Both namespaces
SERVER_ERROR = "error"
ORDER_STATUS_UPDATE = "orderStatusUpdate"
