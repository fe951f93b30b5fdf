# ==============================================================================
# REPORTES DE PEDIDOS
# ==============================================================================
# Exportaciones del panel:
#   - CSV (relatorio_pedidos.csv): una fila por pedido, columnas de la planilla
#   - TXT (pedidos_whatsapp.txt): texto con formato de WhatsApp (*negrita*)
#
# Fechas en la zona de la tienda (dd/mm/YYYY HH:MM), dinero como R$ 1.234,56.
# ==============================================================================

import csv
import io
from typing import List

from storefront.formatting import format_currency, format_local_datetime
from storefront.models import Order

CSV_FILENAME = 'relatorio_pedidos.csv'
TXT_FILENAME = 'pedidos_whatsapp.txt'

CSV_HEADER = [
    'Data', 'Cliente', 'CPF', 'Email', 'Status Cadastro',
    'Produtos', 'Valor Total', 'Status', 'Observação',
]

TXT_SEPARATOR = '-' * 39


def customer_status_label(order: Order) -> str:
    return 'Realizado' if order.is_registered else 'Pendente'


class ReportService:
    """Genera los archivos de exportación a partir de los pedidos."""

    def __init__(self, timezone: str = 'America/Sao_Paulo'):
        self.timezone = timezone

    def orders_csv(self, orders: List[Order]) -> str:
        """
        Planilla de pedidos.

        Returns:
            Contenido CSV (con encabezado)
        """
        si = io.StringIO()
        writer = csv.writer(si)
        writer.writerow(CSV_HEADER)
        for order in orders:
            products = '; '.join(
                f"{item.name} ({item.quantity}x - {format_currency(item.price * item.quantity)})"
                for item in order.items
            )
            writer.writerow([
                format_local_datetime(order.date, self.timezone),
                order.customer.name,
                order.customer.cpf,
                order.customer.email,
                customer_status_label(order),
                products,
                f"{order.total_price:.2f}",
                'Concluída' if order.is_completed else 'Em Aberto',
                order.observation,
            ])
        return si.getvalue()

    def order_txt(self, order: Order) -> str:
        """Bloque de un pedido, listo para pegar en WhatsApp."""
        items = '\n'.join(
            f"- {item.quantity}x {item.name.upper()} ({format_currency(item.price * item.quantity)})"
            for item in order.items
        )
        lines = [
            f"*Pedido de: {order.customer.name}*",
            f"*CPF:* {order.customer.cpf}",
            f"*Data:* {format_local_datetime(order.date, self.timezone)}",
            "",
            "*Itens do Pedido:*",
            items,
            "",
            f"*Total:* {format_currency(order.total_price)}",
            f"*Status Cadastro:* {customer_status_label(order)}",
            f"*Status Venda:* {'Concluída' if order.is_completed else 'Aberto'}",
            f"*Observação:* {order.observation or 'Nenhuma'}",
            TXT_SEPARATOR,
        ]
        return '\n'.join(lines)

    def orders_txt(self, orders: List[Order]) -> str:
        """Todos los pedidos, separados por una línea en blanco."""
        return '\n\n'.join(self.order_txt(order) for order in orders)
