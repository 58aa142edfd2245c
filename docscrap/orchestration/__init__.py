from .config_loader import load_scrape_config

__all__ = ["load_scrape_config"]
