"""
The conversion and publish pipeline.

Examples
--------
```python
from qopublish.config import load_config
from qopublish.publisher import Publisher

report = Publisher(load_config()).run()
```
"""

from .publisher import Publisher
from .summary import print_status, print_summary

__all__ = ["Publisher", "print_status", "print_summary"]
