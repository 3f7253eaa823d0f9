"""Dependencies for the inlets provisioner.

This file is imported by setup.py, so:
- It may not be able to import other inlets modules, since sys.path may not
  be correct.
- It should not import any dependencies, as they may not be installed yet.
"""
from typing import Dict, List

install_requires = [
    'colorama',
    'jsonschema',
    # Cython 3.0 release breaks PyYAML 5.4.*
    # (https://github.com/yaml/pyyaml/issues/601)
    'pyyaml > 3.13, != 5.4.*',
]

cloud_dependencies: Dict[str, List[str]] = {
    'azure': [
        'azure-core>=1.31.0',
        'azure-identity>=1.19.0',
        'azure-mgmt-resource>=23.0.0',
        'azure-mgmt-containerinstance>=10.1.0',
    ],
}

test_dependencies = [
    'pytest',
] + cloud_dependencies['azure']

extras_require: Dict[str, List[str]] = {
    **cloud_dependencies,
    'test': test_dependencies,
}

extras_require['all'] = sorted(
    {dep for deps in cloud_dependencies.values() for dep in deps})
