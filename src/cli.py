"""Tedarik zinciri komut satırı.

Kullanım:
    export SCM_STORAGE_BACKEND="memory"   # veya "dynamodb"
    python -m src.cli
"""

from __future__ import annotations

import logging
import shlex
import sys
from typing import Callable, Optional

from src.bootstrap import ServiceContainer, build_container
from src.config import configure_logging, load_settings
from src.models.supply_chain import Product, Supplier, Warehouse
from src.services.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidArgumentError,
    InvalidStateError,
    SupplyChainError,
)

logger = logging.getLogger("cli")

HELP_TEXT = """
Tedarik Zinciri Yonetimi - Komutlar

  urun <id> <ad> [kategori] [fiyat]         - Urun kaydet
  tedarikci <id> <ad> [iletisim]            - Tedarikci kaydet
  depo <id> <ad> [konum]                    - Depo kaydet
  stok-ekle <urun> <depo> <miktar>          - Stok ekle
  stok-cikar <urun> <depo> <miktar>         - Stok cikar
  stok <urun> <depo>                        - Stok seviyesini goster
  transfer <urun> <kaynak> <hedef> <miktar> - Depolar arasi transfer
  siparis <urun> <miktar> <musteri> <depo>  - Satis siparisi olustur
  karsila <siparis> <depo> <adres>          - Satis siparisini karsila
  satinalma <urun> <miktar> <tedarikci>     - Satin alma siparisi olustur
  rapor                                     - Envanter ve siparis ozeti
  dusuk-stok [esik]                         - Esigin altindaki stoklar
  depo-stok <depo>                          - Bir deponun stoklari
  dogrula                                   - Negatif stok kontrolu
  yardim / help                             - Bu menuyu goster
  cikis / exit                              - Cikis
"""

EXIT_WORDS = ("cikis", "exit", "quit", "q")
HELP_WORDS = ("yardim", "help", "h")


def _int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} tam sayi olmali: {value}") from None


def _cmd_product(c: ServiceContainer, args: list[str]) -> str:
    price = float(args[3]) if len(args) > 3 else 0.0
    category = args[2] if len(args) > 2 else ""
    c.products.save(Product(product_id=args[0], name=args[1], category=category, unit_price=price))
    return f"Urun kaydedildi: {args[0]}"


def _cmd_supplier(c: ServiceContainer, args: list[str]) -> str:
    contact = " ".join(args[2:])
    c.suppliers.save(Supplier(supplier_id=args[0], name=args[1], contact_info=contact))
    return f"Tedarikci kaydedildi: {args[0]}"


def _cmd_warehouse(c: ServiceContainer, args: list[str]) -> str:
    location = " ".join(args[2:])
    c.warehouses.save(Warehouse(warehouse_id=args[0], name=args[1], location=location))
    return f"Depo kaydedildi: {args[0]}"


def _cmd_add_stock(c: ServiceContainer, args: list[str]) -> str:
    item = c.inventory_service.add_stock(args[0], args[1], _int(args[2], "miktar"))
    return f"Stok eklendi: {item.warehouse_id}/{item.product_id} = {item.quantity}"


def _cmd_remove_stock(c: ServiceContainer, args: list[str]) -> str:
    item = c.inventory_service.remove_stock(args[0], args[1], _int(args[2], "miktar"))
    return f"Stok cikarildi: {item.warehouse_id}/{item.product_id} = {item.quantity}"


def _cmd_stock_level(c: ServiceContainer, args: list[str]) -> str:
    level = c.inventory_service.get_stock_level(args[0], args[1])
    return f"{args[1]}/{args[0]}: {level}"


def _cmd_transfer(c: ServiceContainer, args: list[str]) -> str:
    source, target = c.inventory_service.transfer_stock(
        args[0], args[1], args[2], _int(args[3], "miktar")
    )
    return (
        f"Transfer tamamlandi: {source.warehouse_id}={source.quantity}, "
        f"{target.warehouse_id}={target.quantity}"
    )


def _cmd_sales_order(c: ServiceContainer, args: list[str]) -> str:
    order = c.order_service.create_sales_order(args[0], _int(args[1], "miktar"), args[2], args[3])
    return f"Satis siparisi olusturuldu: {order.order_id} ({order.status.value})"


def _cmd_fulfill(c: ServiceContainer, args: list[str]) -> str:
    shipment = c.order_service.fulfill_sales_order(args[0], args[1], " ".join(args[2:]))
    return f"Siparis karsilandi: {args[0]}, sevkiyat {shipment.shipment_id}"


def _cmd_purchase_order(c: ServiceContainer, args: list[str]) -> str:
    order = c.order_service.create_purchase_order(args[0], _int(args[1], "miktar"), args[2])
    return f"Satin alma siparisi olusturuldu: {order.order_id}"


def _cmd_report(c: ServiceContainer, args: list[str]) -> str:
    lines = ["Envanter ozeti:"]
    summary = c.report_service.inventory_summary()
    if not summary:
        lines.append("  (stok kaydi yok)")
    for product_id, entry in sorted(summary.items()):
        breakdown = ", ".join(f"{wh}={qty}" for wh, qty in sorted(entry["warehouses"].items()))
        lines.append(f"  {product_id}: toplam={entry['total']} ({breakdown})")
    lines.append("Siparisler:")
    for key, count in c.report_service.order_status_summary().items():
        lines.append(f"  {key}: {count}")
    return "\n".join(lines)


def _cmd_low_stock(c: ServiceContainer, args: list[str]) -> str:
    threshold = _int(args[0], "esik") if args else 10
    items = c.report_service.low_stock(threshold)
    if not items:
        return f"Esik ({threshold}) altinda stok yok"
    return "\n".join(f"  {i.warehouse_id}/{i.product_id}: {i.quantity}" for i in items)


def _cmd_warehouse_stock(c: ServiceContainer, args: list[str]) -> str:
    items = c.report_service.warehouse_stock(args[0])
    if not items:
        return f"{args[0]} deposunda stok kaydi yok"
    return "\n".join(f"  {i.product_id}: {i.quantity}" for i in items)


def _cmd_verify(c: ServiceContainer, args: list[str]) -> str:
    result = c.report_service.verify_inventory()
    if result.is_valid:
        return "Stok dogrulamasi basarili: negatif stok yok"
    return "\n".join(["Stok dogrulamasi basarisiz:"] + [f"  {e}" for e in result.errors])


# komut: (minimum arguman sayisi, kullanim, isleyici)
COMMANDS: dict[str, tuple[int, str, Callable[[ServiceContainer, list[str]], str]]] = {
    "urun": (2, "urun <id> <ad> [kategori] [fiyat]", _cmd_product),
    "tedarikci": (2, "tedarikci <id> <ad> [iletisim]", _cmd_supplier),
    "depo": (2, "depo <id> <ad> [konum]", _cmd_warehouse),
    "stok-ekle": (3, "stok-ekle <urun> <depo> <miktar>", _cmd_add_stock),
    "stok-cikar": (3, "stok-cikar <urun> <depo> <miktar>", _cmd_remove_stock),
    "stok": (2, "stok <urun> <depo>", _cmd_stock_level),
    "transfer": (4, "transfer <urun> <kaynak> <hedef> <miktar>", _cmd_transfer),
    "siparis": (4, "siparis <urun> <miktar> <musteri> <depo>", _cmd_sales_order),
    "karsila": (3, "karsila <siparis> <depo> <adres>", _cmd_fulfill),
    "satinalma": (3, "satinalma <urun> <miktar> <tedarikci>", _cmd_purchase_order),
    "rapor": (0, "rapor", _cmd_report),
    "dusuk-stok": (0, "dusuk-stok [esik]", _cmd_low_stock),
    "depo-stok": (1, "depo-stok <depo>", _cmd_warehouse_stock),
    "dogrula": (0, "dogrula", _cmd_verify),
}


def handle_command(line: str, container: ServiceContainer) -> Optional[str]:
    """Bir komut satırını çalıştırır ve kullanıcıya gösterilecek metni döndürür.

    Çıkış komutlarında None döner.
    """
    try:
        parts = shlex.split(line)
    except ValueError as e:
        return f"Komut ayrıştırılamadı: {e}"
    if not parts:
        return ""

    action, args = parts[0].lower(), parts[1:]
    if action in EXIT_WORDS:
        return None
    if action in HELP_WORDS:
        return HELP_TEXT

    command = COMMANDS.get(action)
    if command is None:
        return f"Bilinmeyen komut: {action} ('yardim' yazin)"
    min_args, usage, handler = command
    if len(args) < min_args:
        return f"Kullanim: {usage}"

    try:
        return handler(container, args)
    except InsufficientStockError as e:
        return f"Yetersiz stok - mevcut: {e.available}, istenen: {e.requested}"
    except EntityNotFoundError as e:
        return f"Bulunamadi: {e}"
    except InvalidStateError as e:
        return f"Gecersiz durum: {e}"
    except InvalidArgumentError as e:
        return f"Gecersiz arguman: {e}"
    except SupplyChainError as e:
        return f"Islem hatasi: {e}"
    except ValueError as e:
        return f"Gecersiz deger: {e}"


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    container = build_container(settings)

    print("Tedarik Zinciri Yonetimi")
    print("=" * 40)
    print(HELP_TEXT)

    while True:
        try:
            user_input = input("\n> ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nGorusuruz!")
            break

        if not user_input:
            continue

        output = handle_command(user_input, container)
        if output is None:
            print("Gorusuruz!")
            break
        print(output)

    logger.info("Oturum kapatildi")


if __name__ == "__main__":
    sys.exit(main())
