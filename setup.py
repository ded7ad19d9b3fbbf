#! /usr/bin/env python

import os.path
import sys

from setuptools import setup

version = "0.4.0"

if (not os.path.exists(os.path.join("aparte","version.py"))
                                    or "make_version" in sys.argv):
    with open("aparte/version.py", "w") as version_py:
        version_py.write("# pylint: disable=C0111,C0103\n")
        version_py.write("version = {0!r}\n".format(version))
    if "make_version" in sys.argv:
        sys.exit(0)
else:
    exec(open(os.path.join("aparte", "version.py")).read())

setup(
    name =      'aparte',
    version =   version,
    description =   'Extensible XMPP console client core',
    license =   'LGPL',
    classifiers = [
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: GNU Library or Lesser General Public License (LGPL)",
            "Operating System :: POSIX",
            "Programming Language :: Python",
            "Programming Language :: Python :: 3",
            "Topic :: Communications",
            "Topic :: Communications :: Chat",
            "Topic :: Internet",
        ],
    python_requires = '>=3.8',
    install_requires = [
        'tornado >=6.0',
        'regex',
    ],
    extras_require = {
        'test': ['pytest'],
    },
    packages = [
        'aparte',
        'aparte.mainloop',
        'aparte.mods',
        'aparte.test',
    ],
    test_suite = "aparte.test.discover",
)
