from setuptools import setup, find_packages

setup(
    name='rancherctl',
    version='1.0.0',
    packages=find_packages(),
    include_package_data=True,
    package_data={
        'rancherctl': ['manifests/*.yaml'],
    },
    install_requires=[
        'typer[all]',
        'kubernetes',
        'pyyaml',
        'pydantic>=2',
        'python-dotenv',
        'requests'
    ],
    extras_require={
        'test': [
            'pytest',
            'jsonschema',
        ]
    },
    entry_points={
        'console_scripts': [
            'rancherctl=rancherctl.cli:main'
        ]
    },
    description='Idempotent installer and uninstaller for a single-node Rancher management cluster on RKE2',
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: POSIX :: Linux',
    ],
    python_requires='>=3.8',
)
