"""
Script to record VCR cassettes with real HTTP interactions.

Logs in to the portal and fetches a timeline page; no registration form is
submitted. Run this once with real credentials to create cassettes.
"""

import subprocess
import sys
from pathlib import Path

from pydantic import ValidationError


def check_credentials():
    """Check if credentials are available."""
    from booker.config import LoginDetails

    try:
        settings = LoginDetails()
    except ValidationError:
        return False
    return bool(settings.animalagos_email and settings.animalagos_password)


def main():
    """Record VCR cassettes."""
    print("🎬 VCR CASSETTE RECORDING SCRIPT")
    print("=" * 40)

    if not check_credentials():
        print("❌ Missing credentials!")
        print("Please set up booker/.env with:")
        print("   ANIMALAGOS_EMAIL=your_email")
        print("   ANIMALAGOS_PASSWORD=your_password")
        return 1

    print("✅ Credentials found")
    print("🔄 Recording real HTTP interactions...")
    print()

    cmd = [sys.executable, "-m", "pytest", "tests/test_live.py", "-m", "live", "-v", "-s"]

    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        print(f"❌ Recording failed: {e}")
        return 1

    print()
    print("🎉 Recording completed!")

    cassette_dir = Path("tests/cassettes")
    cassettes = sorted(cassette_dir.glob("*.yaml")) if cassette_dir.exists() else []
    if cassettes:
        print("📼 Created cassettes:")
        for cassette in cassettes:
            print(f"   - {cassette.name}")
    else:
        print("⚠️  No cassettes found")

    print()
    print("🧪 Now you can run replay tests:")
    print("   pytest tests/test_live.py -v")
    return 0


if __name__ == "__main__":
    sys.exit(main())
