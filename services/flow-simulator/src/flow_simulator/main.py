import asyncio
import logging
import random
from datetime import datetime, timezone

import httpx

from flow_simulator.settings import get_settings

settings = get_settings()
logger = logging.getLogger("flow-simulator")


def hour_bucket(now: datetime) -> int:
    return int(now.timestamp()) // 3600


def pick_apps(rng: random.Random, apps: list[str]) -> tuple[str, str]:
    if len(apps) < 2:
        return apps[0], apps[0]
    src, dest = rng.sample(apps, 2)
    return src, dest


def build_flow(
    rng: random.Random,
    hour: int,
    vpc_ids: list[str],
    apps: list[str],
    max_bytes: int,
) -> dict[str, object]:
    src_app, dest_app = pick_apps(rng, apps)
    return {
        "vpc_id": rng.choice(vpc_ids),
        "src_app": src_app,
        "dest_app": dest_app,
        "hour": hour,
        "bytes_tx": rng.randint(0, max_bytes),
        "bytes_rx": rng.randint(0, max_bytes),
    }


def build_batch(
    rng: random.Random,
    hour: int,
    size: int,
    vpc_ids: list[str],
    apps: list[str],
    max_bytes: int,
) -> list[dict[str, object]]:
    return [build_flow(rng, hour, vpc_ids, apps, max_bytes) for _ in range(size)]


async def post_batch(
    client: httpx.AsyncClient, batch: list[dict[str, object]]
) -> bool:
    try:
        response = await client.post("/flows", json=batch)
        response.raise_for_status()
    except httpx.HTTPError:
        logger.exception("Failed to send %s flows", len(batch))
        return False
    return True


async def run_once(client: httpx.AsyncClient, rng: random.Random) -> bool:
    hour = hour_bucket(datetime.now(timezone.utc))
    batch = build_batch(
        rng,
        hour,
        settings.BATCH_SIZE,
        settings.VPC_IDS,
        settings.APPS,
        settings.MAX_BYTES,
    )
    sent = await post_batch(client, batch)
    if sent:
        logger.debug("Sent %s flows for hour %s", len(batch), hour)
    return sent


async def run() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL)
    rng = random.Random(settings.SEED)

    if not settings.ENABLED:
        logger.info("Simulator disabled (ENABLED=false)")
        return

    timeout = httpx.Timeout(settings.REQUEST_TIMEOUT_SECONDS)
    async with httpx.AsyncClient(
        base_url=settings.API_BASE_URL, timeout=timeout
    ) as client:
        logger.info("Simulator started against %s", settings.API_BASE_URL)
        while True:
            await run_once(client, rng)
            await asyncio.sleep(settings.TICK_SECONDS)


def main() -> None:
    asyncio.run(run())


if __name__ == "__main__":
    main()
