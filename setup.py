from setuptools import find_packages, setup

setup(
    name='motorshop',
    version='0.3.0',
    description='Domain and intake workflow core for a motor repair shop',
    python_requires='>=3.8',
    packages=find_packages(exclude=[
        'motorshop.test',
        'motorshop.test.*',
    ]),
    install_requires=[
        'python-dateutil',
        'requests',
        'simplejson',
    ],
    extras_require={
        'test': [
            'mock',
            'pytest',
        ],
    },
)
