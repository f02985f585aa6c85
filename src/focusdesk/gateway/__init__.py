"""FocusDesk Gateway -- HTTP 接口与 SSE 通知"""
