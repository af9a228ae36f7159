"""Fetching, domain filtering and orchestration of address scraping."""
