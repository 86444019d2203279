"""
Check every stored Zelle URL
Decodes each club's link and reports recipients that do not match the club
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import select

from boosterhub.config import get_settings
from boosterhub.database import build_sync_engine
from boosterhub.exceptions import DecodeError
from boosterhub.models.club import booster_clubs
from boosterhub.services.payment_link import decode_payment_link, is_placeholder


def check_club(name: str, zelle_url: str) -> str:
    """Problem description for a club's Zelle URL, or "" when it looks right"""
    if not zelle_url:
        return "no Zelle URL"
    if is_placeholder(zelle_url):
        return "placeholder Zelle URL"
    try:
        payload = decode_payment_link(zelle_url)
    except DecodeError as e:
        return f"cannot decode ({e})"
    if payload.name.strip().lower() != name.strip().lower():
        return f"recipient is '{payload.name}' ({payload.token})"
    return ""


def main():
    engine = build_sync_engine(get_settings())
    with engine.connect() as conn:
        clubs = conn.execute(
            select(booster_clubs.c.name, booster_clubs.c.zelle_url, booster_clubs.c.is_payment_enabled)
            .where(booster_clubs.c.is_active.is_(True))
            .order_by(booster_clubs.c.sort_order, booster_clubs.c.name)
        ).fetchall()
    engine.dispose()

    problems = 0
    for club in clubs:
        problem = check_club(club.name, club.zelle_url)
        if problem:
            problems += 1
            flag = " [payment enabled]" if club.is_payment_enabled else ""
            print(f"⚠️  {club.name}: {problem}{flag}")

    print(f"\n{len(clubs)} clubs checked, {problems} need attention")


if __name__ == '__main__':
    main()
