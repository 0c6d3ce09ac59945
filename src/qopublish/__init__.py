# -*- coding: utf-8 -*-
"""# qopublish

Build and publish the QuantumOptics.jl example notebooks.

Each notebook in `notebooks/` is converted twice with nbconvert: to a plain
Julia script in `julia/`, and, after executing every cell, to markdown with
its figures in `markdown/`. The markdown directory is then copied into the
documentation repository and the `codesnippets/` directory into the website
repository.

- `qopublish.config`: the configuration structure and its INI/env layering
- `qopublish.convert`: converter command lines and process handling
- `qopublish.publisher`: the pipeline itself
- `qopublish.cli`: the `qopublish` command
"""

from ._version import __version__
