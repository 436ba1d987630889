"""Allow ``python -m site_crawl``."""
from site_crawl.cli import main

if __name__ == "__main__":
    main()
