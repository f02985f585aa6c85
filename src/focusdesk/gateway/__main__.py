"""启动入口 -- python -m focusdesk.gateway

环境变量 FOCUSDESK_HOST / FOCUSDESK_PORT 控制监听地址。
"""

import os

import uvicorn


def main() -> None:
    """以 uvicorn 运行 gateway"""
    uvicorn.run(
        "focusdesk.gateway.main:app",
        host=os.environ.get("FOCUSDESK_HOST", "127.0.0.1"),
        port=int(os.environ.get("FOCUSDESK_PORT", "8000")),
    )


if __name__ == "__main__":
    main()
