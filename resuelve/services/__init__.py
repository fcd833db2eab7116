"""Domain services: money, currency, geofencing, database and notifications."""
