"""DHT22 sampler entrypoint.

Polls the DHT22 sensor for temperature and humidity readings and logs the
readings that pass outlier rejection, without serving them.

Usage: python -m hygro.dht
"""

from hygro.dht.sampler import main

if __name__ == "__main__":
    main()
