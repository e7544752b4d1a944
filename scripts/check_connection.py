import sys
import time

import requests

from config import Config

# --- MAIN TASK ---
def check_connection(base_url=None, timeout=10, session=requests):
    """
    Pings the /health endpoint of a running deployment and reports whether
    the application and its database are reachable.
    Returns True when both answered.
    """
    base_url = (base_url or Config.APP_BASE_URL).rstrip('/')
    print("Testing AgriRent connection...")
    print(f"URL: {base_url}")

    start = time.perf_counter()
    try:
        response = session.get(f"{base_url}/health", timeout=timeout)
    except requests.exceptions.RequestException as e:
        print("\nNETWORK ERROR: Failed to reach the application.")
        print("The URL may be wrong, the server may be down, or there is no network connection.")
        print(f"\nError details: {e}")
        return False

    elapsed_ms = (time.perf_counter() - start) * 1000
    print(f"Ping complete in {elapsed_ms:.0f}ms.")
    print(f"HTTP Status: {response.status_code} {response.reason}")

    if not response.ok:
        print("The application answered but reported a problem (database unreachable?).")
        return False

    print("Successfully connected to AgriRent!")
    return True

# --- SCRIPT ENTRY POINT ---
if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else None
    sys.exit(0 if check_connection(url) else 1)
