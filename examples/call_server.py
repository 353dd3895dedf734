import httpx, os, sys, uuid

BASE = os.getenv("A2A_BASE", "http://localhost:8000")
AGENT = os.getenv("A2A_AGENT", "echo")

def call_a2a(text: str) -> str:
    payload = {
        "jsonrpc": "2.0",
        "id": str(uuid.uuid4()),
        "method": "message/send",
        "params": {
            "message": {
                "kind": "message",
                "role": "user",
                "parts": [{"kind": "text", "text": text}],
            }
        },
    }
    try:
        r = httpx.post(f"{BASE}/a2a/agent/{AGENT}", json=payload, timeout=30.0)
    except httpx.ConnectError:
        return f"[Error] Could not connect to A2A gateway at {BASE}. Did you run `a2a-gateway serve`?"

    data = r.json()
    if "error" in data:
        err = data["error"]
        return f"[Error {err['code']}] {err['message']}"
    for p in data["result"]["status"]["message"]["parts"]:
        if p.get("kind") == "text":
            return p.get("text", "")
    return "[No text part in A2A response]"

if __name__ == "__main__":
    print(call_a2a(" ".join(sys.argv[1:]) or "What is the best dish in Genova?"))
