"""
Setup file.
"""

from setuptools import setup

URL = "https://github.com/vlcbuild/vlcbuild"
KEYWORDS = "libvlc vlc cffi build linker pkg-config bindings import-library"


if __name__ == "__main__":
    setup(
        keywords=KEYWORDS,
        url=URL,
        package_data={"vlcbuild": ["assets/vlc_cdef.h"]},
        include_package_data=True)
