#!/usr/bin/env python3
"""
Gemini API key diagnostic.

Checks the key format, lists the models the key can see and, with --probe,
sends a test prompt to a fixed list of models.
Usage: job-publisher-check-key --probe
"""

import argparse
import sys
from typing import List, Optional

import requests
from dotenv import load_dotenv

from ..config import get_settings
from ..services.llm import GeminiProvider

MODELS_URL = "https://generativelanguage.googleapis.com/v1beta/models"
PROBE_MODELS = ["gemini-2.0-flash", "gemini-1.5-flash", "gemini-1.0-pro"]
EXPECTED_PREFIX = "AIza"
EXPECTED_LENGTH = 39


def describe_key(key: str) -> List[str]:
    """Human-readable findings about the key's shape."""
    findings = [f"Key starts with: {key[:7]}...", f"Key length: {len(key)}"]
    if not key.startswith(EXPECTED_PREFIX):
        findings.append(f"Warning: Google API keys normally start with '{EXPECTED_PREFIX}'.")
    if len(key) != EXPECTED_LENGTH:
        findings.append(f"Warning: Google API keys are normally {EXPECTED_LENGTH} characters long.")
    return findings


def list_models(key: str, session: Optional[requests.Session] = None) -> bool:
    """Query the model list endpoint; True when the key is accepted."""
    session = session or requests.Session()
    try:
        response = session.get(MODELS_URL, params={"key": key}, timeout=30)
    except requests.RequestException as e:
        print(f"Network error: {e}")
        return False

    try:
        data = response.json()
    except ValueError:
        data = {}

    if not response.ok:
        print("API Key check FAILED.")
        print(f"Status: {response.status_code}")
        print(f"Message: {data.get('error', {}).get('message', response.reason) if isinstance(data, dict) else data}")
        return False

    print("API Key is VALID. Available models:")
    models = data.get("models") or []
    if not models:
        print("No models found in response.")
    for model in models[:5]:
        print(f" - {model.get('name')}")
    return True


def probe_models(provider: GeminiProvider, models: List[str]) -> dict:
    """Send a one-word prompt to each model and report which ones answer."""
    results = {}
    for model in models:
        try:
            provider.complete(model, "test")
        except Exception as e:
            print(f"{model} failed: {e}")
            results[model] = False
        else:
            print(f"Success with {model}")
            results[model] = True
    return results


def main(argv: Optional[List[str]] = None) -> int:
    load_dotenv()
    parser = argparse.ArgumentParser(description="Check the configured Gemini API key.")
    parser.add_argument("--probe", action="store_true", help="Also try a test prompt on known models.")
    args = parser.parse_args(argv)

    key = get_settings().gemini_api_key.strip()
    print("Checking API Key format...")
    if not key:
        print("Error: GEMINI_API_KEY is missing from .env")
        return 1
    for line in describe_key(key):
        print(line)

    ok = list_models(key)
    if args.probe:
        probe_models(GeminiProvider(key), PROBE_MODELS)
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
