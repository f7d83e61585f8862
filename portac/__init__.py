from portac.compiler import compile_source

__version__ = "0.1.0"

__all__ = ["compile_source"]
