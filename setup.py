from setuptools import setup
import codecs
import io
import os.path


with io.open('README.md', encoding='utf-8') as f:
    long_description = f.read()


with io.open('requirements.txt', encoding='utf-8') as f:
    requirements = [r for r in f.read().split('\n') if len(r)]


def read(rel_path):
    here = os.path.abspath(os.path.dirname(__file__))
    with codecs.open(os.path.join(here, rel_path), 'r') as fp:
        return fp.read()


def get_version(rel_path):
    for line in read(rel_path).splitlines():
        if line.startswith('__version__'):
            delim = '"' if '"' in line else "'"
            return line.split(delim)[1]
    raise RuntimeError("Unable to find version string.")


setup(name='bip300-messages',
      version=get_version('bip300/__init__.py'),
      description='Pure python implementation of the BIP300/301 coinbase message format',
      long_description=long_description,
      long_description_content_type='text/markdown',
      license='MIT',
      packages=['bip300'],
      package_data={'bip300': ['py.typed']},
      scripts=[],
      zip_safe=True,
      install_requires=requirements,
      extras_require={'test': ['pytest']})
