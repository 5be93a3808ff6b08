import argparse
import threading
import webbrowser

import uvicorn

from site_assistant.config import get_settings


def main(argv=None):
    settings = get_settings()

    parser = argparse.ArgumentParser(description="Run the JV Solutions website.")
    parser.add_argument("--host", default=settings.web.host)
    parser.add_argument("--port", type=int, default=settings.web.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    parser.add_argument("--open", action="store_true", help="Open the site in a browser once started")
    args = parser.parse_args(argv)

    print(f"JV Solutions server running on port {args.port}")

    if args.open:
        threading.Timer(1.5, lambda: webbrowser.open(f"http://localhost:{args.port}")).start()

    # String import path so --reload can re-import the app
    uvicorn.run("web_app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
