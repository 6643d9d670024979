"""vlcbuild - locate libVLC and prepare it for linking."""

__version__ = "0.1.0"
