"""This module contains schemas used to validate objects.

Schemas conform to the JSON Schema specification as defined at
https://json-schema.org/
"""

_PORT_SCHEMA = {
    'type': 'integer',
    'minimum': 1,
    'maximum': 65535,
}

_POSITIVE_NUMBER_SCHEMA = {
    'type': 'number',
    'exclusiveMinimum': 0,
}


def get_azure_schema():
    return {
        'type': 'object',
        'required': [],
        'additionalProperties': False,
        'properties': {
            'image': {
                'type': 'string',
            },
            'data_port': _PORT_SCHEMA,
            'control_port': _PORT_SCHEMA,
            'memory_gb': _POSITIVE_NUMBER_SCHEMA,
            'cpu': _POSITIVE_NUMBER_SCHEMA,
            'poll_interval_seconds': _POSITIVE_NUMBER_SCHEMA,
            'provision_timeout_seconds': _POSITIVE_NUMBER_SCHEMA,
        }
    }


def get_config_schema():
    return {
        '$schema': 'http://json-schema.org/draft-07/schema#',
        'type': 'object',
        'required': [],
        'additionalProperties': False,
        'properties': {
            'azure': get_azure_schema(),
        },
    }
