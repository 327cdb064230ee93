#!/usr/bin/env python3
"""Demo client that walks through a conversation with the Chat service."""
import requests
import time
from nagarassist.config import get_service_url

CHAT_URL = get_service_url("chat")


def say(text: str) -> dict:
    print(f"\n{'User:':<12} {text}")
    resp = requests.post(f"{CHAT_URL}/chat/send", json={"text": text}, timeout=10)
    resp.raise_for_status()
    turn = resp.json()
    for reply in turn["replies"]:
        print(f"{'Assistant:':<12} {reply['text']}")
    return turn


def demo_conversation():
    """Report a water complaint, then confirm its resolution."""
    print("\n" + "=" * 70)
    print("🏛️  NAGAR PALIKA ASSISTANT DEMO")
    print("=" * 70)

    try:
        resp = requests.post(f"{CHAT_URL}/auth/login",
                             json={"email": "asha@example.com", "name": "Asha Verma"}, timeout=5)
        resp.raise_for_status()
    except requests.exceptions.RequestException as e:
        print(f"{'Error:':<12} Failed to reach chat service: {e}")
        print("\n⚠️  Make sure the service is running: python3 services/chat/service.py")
        return

    for m in requests.get(f"{CHAT_URL}/chat/messages", timeout=5).json():
        print(f"{'Assistant:':<12} {m['text']}")

    say("help")

    print(f"\n{'[Quick action]':<12} Water Supply")
    turn = requests.post(f"{CHAT_URL}/chat/quick-action", json={"category": "water"}, timeout=10).json()
    print(f"{'Assistant:':<12} {turn['replies'][0]['text']}")

    say("12 MG Road, near the post office")
    turn = say("No water since 3 days")
    complaint_id = turn["replies"][0]["metadata"]["complaint_id"]

    say("What is my complaint status?")

    # The municipality marks the complaint resolved; the citizen is asked to confirm
    requests.patch(f"{CHAT_URL}/complaints/{complaint_id}/status", json={"status": "resolved"}, timeout=5)
    print(f"\n{'[Municipality]':<12} {complaint_id} marked resolved")
    turn = requests.post(f"{CHAT_URL}/complaints/{complaint_id}/resolution-check", timeout=10).json()
    print(f"{'Assistant:':<12} {turn['replies'][0]['text']}")

    say("hmm")
    say("no, still dry")

    handoff = requests.get(f"{CHAT_URL}/handoff", timeout=5).json()
    print("\n" + "=" * 70)
    print("📱 WHATSAPP HAND-OFF")
    print("=" * 70)
    print(handoff["url"])

    stats = requests.get(f"{CHAT_URL}/stats", timeout=5).json()
    print("\n" + "=" * 70)
    print("📊 SUMMARY")
    print("=" * 70)
    print(f"  Complaints: {stats['complaints']['count']}")
    print(f"  By status:  {stats['complaints']['by_status']}")
    print(f"  Messages:   {stats['messages']}")

    print("\n" + "=" * 70)
    print("✅ Demo completed!")
    print("=" * 70)


if __name__ == "__main__":
    print("\nWaiting for the service to be ready...")
    time.sleep(1)
    demo_conversation()
