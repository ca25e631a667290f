"""Entry point for `python -m resource_cache`."""

from resource_cache.tool.resource_cache import main

if __name__ == "__main__":
    main()
