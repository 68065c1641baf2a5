import httpx
import sys

API_BASE = "http://localhost:8000/api/v1"

SAMPLE_CHECK = {
    "id": "chk_demo",
    "type": "electronic-id",
    "status": "closed",
    "matter_category": "conveyancing",
    "selected_tasks": ["idv", "likeness", "document-verification", "aml-screen", "address-check", "sof"],
    "task_outcomes": {
        "document": {"result": "clear", "data": {"integrity": "passed"}},
        "peps": {"result": "alert", "data": {"total_hits": 2}},
        "address": {"result": "alert", "data": {"quality": 72}},
    },
    "provider_tasks": [{"type": "report:peps", "opts": {"monitored": True}}],
}

def run_assessment():
    print(f"Assessing check {SAMPLE_CHECK['id']} ({SAMPLE_CHECK['type']})...")
    try:
        # Validate task selection
        resp = httpx.post(f"{API_BASE}/checks/validate", json=SAMPLE_CHECK, timeout=10.0)
        resp.raise_for_status()
        validation = resp.json()
        print(f"Validation: {validation['status']}")
        if validation["status"] == "missing_required_tasks":
            print(f"Missing tasks: {', '.join(validation['missing'])}")
            return

        # Assess outcomes
        resp = httpx.post(f"{API_BASE}/checks/assessment", json=SAMPLE_CHECK, timeout=10.0)
        resp.raise_for_status()
        assessment = resp.json()

        print(f"{assessment['label']}: {assessment['outcome']}")
        for warning in assessment["warnings"]:
            print(f"  [{warning['severity']}] {warning['message']}")
        print(f"Monitoring: {'on' if assessment['monitoring_enabled'] else 'off'}")
        print(f"Safe Harbour badge: {'yes' if assessment['safe_harbour_badge_visible'] else 'no'}")

    except httpx.HTTPError as e:
        print(f"Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run_assessment()
