"""Users web service: MongoDB-backed CRUD endpoints with InfluxDB request metrics."""
