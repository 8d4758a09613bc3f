# SPDX-FileCopyrightText: Copyright (c) 2023-2024, Kr8s Developers (See LICENSE for list)
# SPDX-License-Identifier: BSD 3-Clause License
"""Utilities for working with kubeconfig data structures."""
from __future__ import annotations


def list_dict_unpack(
    input_list: list[dict], key: str = "key", value: str = "value"
) -> dict:
    """Convert a list of named entries to a single dictionary.

    Later entries win when a name appears more than once.

    Args:
        input_list: The list of dictionaries, e.g. the ``clusters`` of a kubeconfig.
        key: The entry key holding the name. Defaults to "key".
        value: The entry key holding the value. Defaults to "value".

    Returns:
        A dictionary mapping each name to its value.
    """
    return {i[key]: i[value] for i in input_list}


def dict_list_pack(
    input_dict: dict, key: str = "key", value: str = "value"
) -> list[dict]:
    """Convert a dictionary back to a list of named entries.

    Args:
        input_dict: The dictionary to convert.
        key: The entry key to store each name under. Defaults to "key".
        value: The entry key to store each value under. Defaults to "value".

    Returns:
        A list of ``{key: name, value: value}`` dictionaries.
    """
    return [{key: k, value: v} for k, v in input_dict.items()]


def dedupe_named(input_list: list[dict], value: str) -> list[dict]:
    """Remove duplicate named kubeconfig entries, keeping the last one of each name."""
    return dict_list_pack(list_dict_unpack(input_list, "name", value), "name", value)
