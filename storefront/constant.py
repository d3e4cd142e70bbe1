"""Editable user-facing strings and generation prompts."""

from __future__ import annotations

MSG_API_KEY_MISSING = "API 金鑰未設定，應用程式無法運作。"
MSG_API_KEY_SAVED = "API 金鑰已儲存。"
MSG_RESTAURANTS_UNAVAILABLE = "無法載入餐廳列表，請稍後再試。"
MSG_MENU_UNAVAILABLE = "無法載入 {restaurant} 的菜單。"
MSG_ITEM_ADDED = "已將「{item}」加入購物車！"
MSG_ITEM_REMOVED = "已從購物車移除「{item}」。"
MSG_ORDER_SUBMITTED = "訂單成功送出！"
MSG_ORDER_FAILED = "訂單提交失敗：{reason}"
MSG_ORDER_UNKNOWN_ERROR = "發生未知錯誤，無法提交訂單。"
MSG_CHECKOUT_MISSING_FIELDS = "請填寫：{fields}"
MSG_CART_EMPTY = "購物車是空的。"

MSG_GATEWAY_STATUS = "Google Sheets API 回應錯誤，狀態碼: {status}"
MSG_GATEWAY_REJECTED = "無法將訂單儲存至 Google Sheets"
MSG_GATEWAY_UNKNOWN = "儲存訂單時發生未知錯誤"
MSG_GATEWAY_NOT_CONFIGURED = "尚未設定 Google Sheets 網址（STOREFRONT_SCRIPT_URL）"

PLACEHOLDER_LOADING_RESTAURANTS = "正在為您尋找美味餐廳..."
PLACEHOLDER_PICK_RESTAURANT = "請先選擇一間餐廳"
PLACEHOLDER_LOADING_MENU = "正在載入菜單..."
PLACEHOLDER_EMPTY_MENU = "目前沒有可供點選的餐點。"
PLACEHOLDER_EMPTY_CART = "購物車是空的，去挑選美食吧！"
PLACEHOLDER_LOADING_CONFIRMATION = "正在載入訂單確認..."
PLACEHOLDER_SUBMITTING = "正在送出訂單..."

FIELD_LABELS: dict[str, str] = {
    "customer_name": "姓名",
    "customer_phone": "電話",
    "delivery_address": "外送地址",
    "order_notes": "備註",
}

PROMPT_RESTAURANTS = (
    "List 12 popular and diverse food delivery restaurants in Taipei, Taiwan. "
    "Provide a variety of cuisine types. For each restaurant, include a unique id, name, category, "
    "a realistic rating between 3.5 and 5.0, number of reviews, estimated delivery time, "
    "minimum order value, and a relevant image URL."
)

PROMPT_MENU = (
    'Generate a realistic menu with 8-12 items for a restaurant in Taiwan called "{restaurant}". '
    "For each menu item, provide a unique id, its name, and price in TWD."
)

PROMPT_CONFIRMATION = (
    "A customer named {customer} has placed a food delivery order for these items: {items}. "
    "The delivery address is {address}. Please generate a unique 8-character alphanumeric order number "
    "and estimate the delivery time. The current time is {now}. "
    "Assume delivery takes between 25 to 50 minutes. Respond in JSON."
)
