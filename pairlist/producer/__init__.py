from pairlist.producer.client import ProducerClient
from pairlist.producer.errors import FatalHttpError, ProducerHttpError, RateLimitedError, TransientHttpError

__all__ = ["ProducerClient", "FatalHttpError", "ProducerHttpError", "RateLimitedError", "TransientHttpError"]
