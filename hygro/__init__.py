"""DHT22 temperature and humidity monitor."""
