import logging
import os
import sys
import threading
import time
import webbrowser
from pathlib import Path

import uvicorn

HOST = os.environ.get("LINKVAULT_HOST", "127.0.0.1")
PORT = int(os.environ.get("LINKVAULT_PORT", "8765"))

PACKAGE_DIR = Path(__file__).parent / "linkvault"


def run_uvicorn():
    """
    Serve linkvault.main:app in this process
    (called in a background thread).
    """
    config = uvicorn.Config(
        "linkvault.main:app",
        host=HOST,
        port=PORT,
        log_level="info",
        reload=False,  # restarts go through the watch loop below
    )
    server = uvicorn.Server(config)
    server.run()


def open_browser_once():
    url = f"http://{HOST}:{PORT}/docs"
    print(f"[server] Opening {url}")
    try:
        webbrowser.open(url)
    except webbrowser.Error:
        pass


def _source_mtimes():
    return {p: p.stat().st_mtime for p in PACKAGE_DIR.glob("*.py")}


def main():
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    t = threading.Thread(target=run_uvicorn, daemon=True)
    t.start()

    # give it a moment to boot before opening browser
    time.sleep(1.0)
    open_browser_once()

    mtimes = _source_mtimes()
    print("[server] Watching linkvault/ for changes. Press Ctrl+C to quit.")

    try:
        while True:
            time.sleep(1.0)
            current = _source_mtimes()
            changed = [p for p, m in current.items() if mtimes.get(p) != m]
            mtimes = current
            if not changed:
                continue
            print(f"\n[server] Detected change in {', '.join(p.name for p in changed)}")
            ans = input("Apply changes and restart server? [y/N]: ").strip().lower()
            if ans == "y":
                print("[server] Restarting with new code...")
                os.execv(sys.executable, [sys.executable] + sys.argv)
            else:
                print("[server] Ignoring change. Continuing...")
    except KeyboardInterrupt:
        print("\n[server] Shutting down.")


if __name__ == "__main__":
    main()
