"""ALife — predator/prey/plant artificial-life simulation."""

__version__ = "0.1.0"
