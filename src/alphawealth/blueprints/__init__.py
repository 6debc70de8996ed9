"""HTTP blueprints for the AlphaWealth JSON API."""
