from setuptools import setup
from pathlib import Path

this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text()

setup(
    name = 'objcpatch',
    version = "1.0.0",
    description = 'In-place Objective-C class/category name patcher for MachO binaries',
    long_description = long_description,
    long_description_content_type = 'text/markdown',
    python_requires = '>=3.8',
    author = 'cynder',
    license = 'MIT',
    install_requires = [
        'Pygments'
    ],
    extras_require = {
        'test': ['pytest']
    },
    packages = ['objcpatch', 'objcpatch_macho', 'objcpatch_lib'],
    package_dir = {
        'objcpatch': 'src/objcpatch',
        'objcpatch_macho': 'src/objcpatch_macho',
        'objcpatch_lib': 'src/objcpatch_lib'
    },
    classifiers = [
        'Programming Language :: Python :: 3',
        'License :: OSI Approved :: MIT License',
        'Operating System :: OS Independent'
    ],
    entry_points = {'console_scripts': [
        'objcpatch=objcpatch.objcpatch_script:main'
    ]}
)
