import os, sys, json, requests

API_URL = (os.environ.get("STRAVA_MCP_HTTP_BASE") or "http://localhost:8080").rstrip("/")
PER_PAGE = int(os.environ.get("SMOKE_PER_PAGE") or "3")


def die(msg, payload=None):
    if payload is not None:
        print(json.dumps(payload, indent=2, ensure_ascii=False))
    print(msg, file=sys.stderr); sys.exit(1)

# health
r = requests.get(f"{API_URL}/", timeout=10)
if r.status_code != 200: die(f"health HTTP {r.status_code}", r.text)
if (r.json() or {}).get("status") != "ok": die("health body not ok", r.json())
print(f"✔ health ok ({r.json().get('service')} {r.json().get('version')})")

# tool listing
r = requests.get(f"{API_URL}/mcp/tools", timeout=10)
if r.status_code != 200: die(f"tools HTTP {r.status_code}", r.text)
names = [t["name"] for t in r.json().get("tools", [])]
print(f"✔ tools: {', '.join(names)}")

# athlete profile
r = requests.post(f"{API_URL}/mcp/tools/get-athlete", json={}, timeout=30)
if r.status_code != 200: die(f"get-athlete HTTP {r.status_code}", r.json())
athlete = r.json()["result"]
print(f"✔ get-athlete ok (id={athlete.get('id')})")

# recent activities
r = requests.post(f"{API_URL}/mcp/tools/list-activities", json={"per_page": PER_PAGE}, timeout=30)
if r.status_code != 200: die(f"list-activities HTTP {r.status_code}", r.json())
print(f"✔ list-activities ok ({len(r.json()['result'])} activities)")
