from setuptools import setup, find_packages

import codecs
import datetime
import os


PACKAGE = "timedmemo"
VERSION = "0.1"

# For daily snapshot versioning mode:
if os.environ.get("_SNAPSHOT_BUILD", None) is not None:
    VERSION = VERSION + datetime.datetime.now().strftime(".%Y%m%d")


setup(name=PACKAGE,
      version=VERSION,
      description=("Memoization of functions with expiration of cache "
                   "entries"),
      long_description=codecs.open("README.rst", 'r', 'utf-8').read(),
      author="Satoru SATOH",
      author_email="ssato@redhat.com",
      license="GPLv3+",
      packages=find_packages(),
      include_package_data=True,
      python_requires=">=3.6",
      install_requires=["anyconfig", "munch"],
      extras_require=dict(test=["pytest"]))

# vim:sw=4:ts=4:et:
