from setuptools import setup, find_packages
# To use a consistent encoding
from codecs import open
from os import path

here = path.abspath(path.dirname(__file__))

# Get the long description from the README file
with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    version='0.1.0',
    name='pyigd',
    description='UPnP IGD port forwarding client',
    keywords=('UPnP, IGD, SSDP, SOAP, NAT traversal, port forwarding,'
              ' port mapping, python'),
    long_description=long_description,
    author='pyigd developers',
    test_suite="tests",
    license='MIT',
    packages=find_packages(exclude=('tests', 'docs')),
    install_requires=[
        'psutil>=5.9.3',
        'requests>=2.8.1'
    ],
    extras_require={
        'test': ['pytest']
    },
    entry_points={
        'console_scripts': ['pyigd=pyigd.__main__:main']
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
)
