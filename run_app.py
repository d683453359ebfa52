import os

import uvicorn


def main() -> None:
    """Run the IPInfo tester service with uvicorn.

    Requires IPINFO_TOKEN; host and port can be overridden with
    IPINFO_TESTER_HOST and IPINFO_TESTER_PORT.
    """
    uvicorn.run(
        "ipinfo_client.main:app",
        host=os.getenv("IPINFO_TESTER_HOST", "127.0.0.1"),
        port=int(os.getenv("IPINFO_TESTER_PORT", "8000")),
        reload=os.getenv("IPINFO_TESTER_RELOAD", "").lower() in ("1", "true", "yes"),
    )


if __name__ == "__main__":
    main()
