"""
Command-line interface for qopublish.

Built with Click. Every command reads the layered configuration (defaults,
INI files, QOPUBLISH_* environment variables) and lets flags override it.

Examples
--------
Convert and publish everything with the defaults:
```bash
$ qopublish
```

Reconvert only what is missing, four notebooks at a time:
```bash
$ qopublish run --no-overwrite --workers 4
```

CLI Tree
--------

```
$ qopublish --tree
cli
└── config
    └── init
    └── show
└── convert
└── list
└── publish
└── run
```
"""

from .base import cli, tree_option

__all__ = ["cli", "tree_option"]
