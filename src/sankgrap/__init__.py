from .matcher import SubdomainMatcher
from .extractor import Mode, extract
from .sink import ResultSink
from .grabber import WorkerPool, grab

__version__ = "0.1.0"
