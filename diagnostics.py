"""Connectivity and runtime diagnostics helpers."""
from __future__ import annotations

import os

import requests


def path_check(name, path, create=False):
    check = {"name": name, "path": path or "", "exists": False, "writable": False, "ok": False}
    if not path:
        check["error"] = "not configured"
        return check
    if os.path.exists(path):
        check["exists"] = True
        check["writable"] = os.access(path, os.W_OK)
        check["ok"] = check["writable"]
        if not check["ok"]:
            check["error"] = "path not writable"
        return check
    if create:
        try:
            os.makedirs(path, exist_ok=True)
            check["exists"] = True
            check["writable"] = os.access(path, os.W_OK)
            check["ok"] = check["writable"]
            if not check["ok"]:
                check["error"] = "created but not writable"
            return check
        except Exception as e:
            check["error"] = str(e)
            return check
    check["error"] = "path does not exist"
    return check


def test_prowlarr_connection(url, api_key, requests_module=requests):
    if not url or not api_key:
        return {"success": False, "error": "URL and API key required", "error_class": "missing_config"}
    try:
        resp = requests_module.get(f"{url.rstrip('/')}/api/v1/indexer", headers={"X-Api-Key": api_key}, timeout=10)
        if resp.status_code == 200:
            indexers = resp.json()
            return {"success": True, "message": f"Connected ({len(indexers)} indexers)", "indexer_count": len(indexers)}
        if resp.status_code == 401:
            return {"success": False, "error": "Invalid API key", "error_class": "auth_failed"}
        return {"success": False, "error": f"HTTP {resp.status_code}", "error_class": f"http_{resp.status_code}"}
    except requests_module.Timeout:
        return {"success": False, "error": "Timed out connecting to Prowlarr", "error_class": "timeout"}
    except requests_module.ConnectionError:
        return {"success": False, "error": "Connection refused. Is Prowlarr running?", "error_class": "unreachable"}
    except Exception as e:
        return {"success": False, "error": str(e), "error_class": "request_error"}


def test_tmdb_connection(api_key, base_url="https://api.themoviedb.org/3", requests_module=requests):
    if not api_key:
        return {"success": False, "error": "API key required", "error_class": "missing_config"}
    try:
        resp = requests_module.get(
            f"{base_url.rstrip('/')}/configuration",
            params={"api_key": api_key},
            timeout=10,
        )
        if resp.status_code == 200:
            images = resp.json().get("images") or {}
            return {"success": True, "message": "Connected", "image_base_url": images.get("secure_base_url")}
        if resp.status_code == 401:
            return {"success": False, "error": "Invalid API key", "error_class": "auth_failed"}
        return {"success": False, "error": f"HTTP {resp.status_code}", "error_class": f"http_{resp.status_code}"}
    except requests_module.Timeout:
        return {"success": False, "error": "Timed out connecting to TMDb", "error_class": "timeout"}
    except requests_module.ConnectionError:
        return {"success": False, "error": "Could not reach TMDb", "error_class": "unreachable"}
    except Exception as e:
        return {"success": False, "error": str(e), "error_class": "request_error"}


def runtime_config_validation(config_module, *, run_network_tests=False, requests_module=requests):
    checks = {"paths": [], "services": {}}
    checks["paths"].append(path_check("db_dir", os.path.dirname(config_module.DB_PATH) or ".", create=True))

    if not run_network_tests:
        checks["services"]["prowlarr"] = {"success": None, "info": "skipped"}
        checks["services"]["tmdb"] = {"success": None, "info": "skipped"}
    else:
        checks["services"]["prowlarr"] = (
            test_prowlarr_connection(config_module.PROWLARR_URL, config_module.PROWLARR_API_KEY, requests_module=requests_module)
            if config_module.has_prowlarr() else {"success": None, "info": "not configured"}
        )
        checks["services"]["tmdb"] = (
            test_tmdb_connection(config_module.TMDB_API_KEY, config_module.TMDB_BASE_URL, requests_module=requests_module)
            if config_module.has_tmdb() else {"success": None, "info": "not configured"}
        )

    path_errors = [p for p in checks["paths"] if p.get("ok") is False]
    svc_failures = [v for v in checks["services"].values() if v.get("success") is False]
    checks["success"] = not path_errors and not svc_failures
    return checks
