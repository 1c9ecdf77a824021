from setuptools import setup, find_packages

__version__ = '0.1.0'

requirements = [
    'coloredlogs',
]

test_requirements = [
    'pytest',
]

setup(
    name='nftledger',
    version=__version__,
    description='Non-fungible token ledger with capped minting, approvals and safe transfers.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=requirements,
    extras_require={
        'test': test_requirements,
    },
    python_requires='>=3.8',
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
    zip_safe=True,
    include_package_data=True,
)
