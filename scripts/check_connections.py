#!/usr/bin/env python3
"""
Connection Check Script

Run this to verify MongoDB, the AI provider and the n8n webhook are reachable.
Usage: python scripts/check_connections.py
"""
import sys
sys.path.insert(0, '.')

from resumate.core.config import get_settings
from resumate.core.logging_config import setup_logging
from resumate.db.mongodb import test_mongo_connection
from resumate.services.llm_client import TextGenerationClient
from resumate.services.n8n_client import N8nClient


def main():
    settings = get_settings()
    setup_logging("WARNING", settings.log_file)
    print("=" * 50)
    print("RESUMATE - CONNECTION CHECK")
    print("=" * 50)

    print("\n[1] Checking MongoDB...")
    print(f"    URI: {settings.mongodb_uri}")
    print(f"    Database: {settings.mongodb_db}")
    if test_mongo_connection():
        print("    ✅ MongoDB: CONNECTED")
    else:
        print("    ❌ MongoDB: FAILED")

    print("\n[2] Checking AI provider...")
    client = TextGenerationClient(settings)
    if client.is_configured:
        print(f"    Provider: {client.provider} ({client.model})")
        if client.test_connection():
            print("    ✅ AI provider: CONNECTED")
        else:
            print("    ❌ AI provider: FAILED (matching will use fallback scoring)")
    else:
        print("    ⚠️  No AI provider key configured (fallback scoring only)")

    print("\n[3] Checking n8n resume webhook...")
    if settings.n8n_resume_parse_webhook:
        if N8nClient(settings).test_webhook():
            print("    ✅ n8n: REACHABLE")
        else:
            print("    ❌ n8n: FAILED")
    else:
        print("    ⚠️  N8N_RESUME_PARSE_WEBHOOK not set")

    print("\n" + "=" * 50)
    print("Connection check complete!")
    print("=" * 50)


if __name__ == "__main__":
    main()
