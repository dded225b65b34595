from __future__ import annotations


def initialize_runtime_services(services):
    """Log the integrations, seed categories and start the refresh scheduler."""
    config = services["config"]
    logger = services["logger"]

    integrations = []
    if config.has_prowlarr():
        integrations.append("Prowlarr")
    if config.has_tmdb():
        integrations.append("TMDb")
    logger.info("Videoclub starting. Integrations: %s", ", ".join(integrations) or "none")
    if services["curator"].dry_run:
        logger.info("Dry-run mode: featured content is served from static mock data")

    diag = services["runtime_config_validation"]()
    for path_check in diag["paths"]:
        if not path_check.get("ok"):
            logger.warning("Path check failed for %s (%s): %s", path_check["name"], path_check["path"], path_check.get("error"))

    try:
        services["category_config"].initialize()
    except Exception as e:
        logger.error("Could not seed featured categories: %s", e)

    # no refresh here; the first request or the first hourly tick fills the cache
    services["scheduler"].initialize()
    return services["scheduler"]
