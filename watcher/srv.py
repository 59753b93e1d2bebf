"""Service-record lookup for the watched hostname."""

from __future__ import annotations

import logging

import dns.asyncresolver
import dns.exception
import dns.name

from watcher.poller import Target

SRV_PREFIX = "_minecraft._tcp."

logger = logging.getLogger(__name__)


async def resolve_target(hostname: str, port: int) -> Target:
    """Return the SRV target for `hostname`, or hostname:port when there is none."""
    try:
        answer = await dns.asyncresolver.resolve(SRV_PREFIX + hostname, "SRV")
    except dns.exception.DNSException as e:
        logger.debug("no SRV record for %s: %s", hostname, e)
        return Target(hostname, port)

    record = next(iter(answer), None)
    # A target of "." means the service is decidedly not available there.
    if record is None or record.target == dns.name.root:
        logger.debug("no usable SRV record for %s", hostname)
        return Target(hostname, port)

    target = Target(record.target.to_text(omit_final_dot=True), int(record.port))
    logger.info("SRV record found: %s:%s -> %s", hostname, port, target)
    return target
