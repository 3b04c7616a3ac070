#    Licensed under the Apache License, Version 2.0 (the "License"); you may
#    not use this file except in compliance with the License. You may obtain
#    a copy of the License at
#
#         http://www.apache.org/licenses/LICENSE-2.0
#
#    Unless required by applicable law or agreed to in writing, software
#    distributed under the License is distributed on an "AS IS" BASIS, WITHOUT
#    WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied. See the
#    License for the specific language governing permissions and limitations
#    under the License.

import datetime
import hashlib
import logging
import typing as ty

import iso8601


def get_logger(name: str) -> logging.Logger:
    name = name.replace(__name__.split('.')[0], 'stacksession')
    return logging.getLogger(name)


logger = get_logger(__name__)


def normalize_time(timestamp: datetime.datetime) -> datetime.datetime:
    """Normalize time in arbitrary timezone to UTC naive object."""
    offset = timestamp.utcoffset()
    if offset is None:
        return timestamp
    return timestamp.replace(tzinfo=None) - offset


def parse_isotime(timestr: str) -> datetime.datetime:
    """Parse time from ISO 8601 format."""
    try:
        return iso8601.parse_date(timestr)
    except iso8601.ParseError as e:
        raise ValueError(str(e))
    except TypeError as e:
        raise ValueError(str(e))


def from_utcnow(
    days: ty.Union[int, float] = 0,
    seconds: ty.Union[int, float] = 0,
    minutes: ty.Union[int, float] = 0,
    hours: ty.Union[int, float] = 0,
) -> datetime.datetime:
    """Calculate the time in the future from utcnow.

    :param days: Days to add to timestamp.
    :param seconds: Seconds to add to timestamp.
    :param minutes: Minutes to add to timestamp.
    :param hours: Hours to add to timestamp.
    :returns:
        The time in the future based on ``timedelta_kwargs`` and in TZ-naive
        format.
    :rtype:
        datetime.datetime
    """
    now = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
    delta = datetime.timedelta(
        days=days, seconds=seconds, minutes=minutes, hours=hours
    )
    return now + delta


def before_utcnow(
    days: ty.Union[int, float] = 0,
    seconds: ty.Union[int, float] = 0,
    minutes: ty.Union[int, float] = 0,
    hours: ty.Union[int, float] = 0,
) -> datetime.datetime:
    """Calculate the time in the past from utcnow.

    :returns:
        The time in the past based on ``timedelta_kwargs`` and in TZ-naive
        format.
    :rtype:
        datetime.datetime
    """
    return from_utcnow(days=-days, seconds=-seconds, minutes=-minutes,
                       hours=-hours)


def hash_secret(value: str) -> str:
    """Return a printable digest of a secret for use in log output."""
    digest = hashlib.sha256(value.encode('utf-8')).hexdigest()
    return '{SHA256}' + digest
