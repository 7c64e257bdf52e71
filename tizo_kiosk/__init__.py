"""TIZO kiosk ordering API: offer queries and top-up credit conversion."""
