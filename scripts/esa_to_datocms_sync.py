"""
CLI: esa -> DatoCMS (re-sync completo o de un post).

Uso recomendado:
  - Ejecutar como job (cron/systemd timer) para re-indexar todo el team.
  - Los webhooks cubren el dia a dia; este script repara divergencias.

Variables de entorno requeridas (ver esa_sync/core/config.py):
  - ESA_WEBHOOK_SECRET, ESA_API_TOKEN, ESA_TEAM, ESA_PRIVATE_CATEGORY_REGEX
  - DATOCMS_FULL_ACCESS_API_TOKEN, DATOCMS_POST_ITEM_ID, DATOCMS_BUILD_TRIGGER_ID

Ejecución:
  python scripts/esa_to_datocms_sync.py
  python scripts/esa_to_datocms_sync.py --post 123
  python scripts/esa_to_datocms_sync.py --failure-policy abort --deploy-each
  python scripts/esa_to_datocms_sync.py --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

# Permite ejecutar este script desde cualquier cwd sin instalar el paquete.
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

# Cargar variables desde .env si existe (sin pisar el entorno).
load_dotenv(_PROJECT_ROOT / ".env", override=False)

from esa_sync.core.config import FAILURE_POLICIES, REQUIRED_KEYS, Settings, validate_settings
from esa_sync.infrastructure.container import build_services
from esa_sync.infrastructure.memory.in_memory_adapters import InMemoryTargetCms
from esa_sync.shared.exceptions.domain import ConfigurationException, SyncAbortedException


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Sincroniza posts de esa hacia DatoCMS.")
    parser.add_argument(
        "--post",
        type=int,
        default=None,
        help="Sincroniza solo este numero de post (siempre dispara deploy salvo --skip-deploy).",
    )
    deploy = parser.add_mutually_exclusive_group()
    deploy.add_argument(
        "--skip-deploy",
        dest="skip_deploy",
        action="store_true",
        default=None,
        help="No disparar deploy por post (en sync completo, deploy unico al final).",
    )
    deploy.add_argument(
        "--deploy-each",
        dest="skip_deploy",
        action="store_false",
        help="Disparar deploy despues de cada post.",
    )
    parser.add_argument(
        "--no-final-deploy",
        action="store_true",
        help="Con --skip-deploy, tampoco disparar el deploy al final.",
    )
    parser.add_argument(
        "--failure-policy",
        choices=FAILURE_POLICIES,
        default=None,
        help="Que hacer si falla un post (por defecto SYNC_ALL_FAILURE_POLICY).",
    )
    parser.add_argument(
        "--preserve-created-at",
        action="store_true",
        help="Usar la fecha de creacion de esa para los posts nuevos.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Lee esa pero escribe en un CMS en memoria (no toca DatoCMS).",
    )
    return parser


async def _run(args: argparse.Namespace, config: Settings) -> int:
    target_cms = InMemoryTargetCms() if args.dry_run else None
    services = build_services(config, target_cms=target_cms)

    try:
        if args.post is not None:
            result = await services.post_sync.sync_post(
                args.post,
                skip_deploy=bool(args.skip_deploy),
            )
            logger.info(
                f"Post #{result.number}: {result.action} "
                f"(id={result.target_post_id}, publish={result.publish_action}, deployed={result.deployed})"
            )
            return 0

        skip_deploy = config.SYNC_ALL_SKIP_DEPLOY if args.skip_deploy is None else args.skip_deploy
        failure_policy = args.failure_policy or config.SYNC_ALL_FAILURE_POLICY

        logger.info("Iniciando esa -> DatoCMS sync completo...")
        try:
            result = await services.sync_all.sync_all(
                skip_deploy=skip_deploy,
                failure_policy=failure_policy,
                deploy_at_end=not args.no_final_deploy,
                preserve_created_at=args.preserve_created_at,
            )
        except SyncAbortedException as e:
            logger.error(e.message)
            return 1

        for failure in result.failures:
            logger.error(f"  #{failure.number}: {failure.message}")

        if args.dry_run:
            for operation, post_id in services.target_cms.calls:
                logger.info(f"[dry-run] {operation} {post_id or ''}")

        return 0 if result.success else 1
    finally:
        await services.aclose()


def main() -> int:
    args = _build_parser().parse_args()

    config = Settings()
    # En dry-run no se necesita DatoCMS
    required = [k for k in REQUIRED_KEYS if not (args.dry_run and k.startswith("DATOCMS_"))]
    try:
        validate_settings(config, required_keys=required)
    except ConfigurationException as e:
        for error in e.errors:
            logger.error(f"CONFIG: {error}")
        return 2

    return asyncio.run(_run(args, config))


if __name__ == "__main__":
    raise SystemExit(main())
