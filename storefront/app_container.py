# ==============================================================================
# CONTENEDOR DE DEPENDENCIAS - Inyección de servicios
# ==============================================================================
# Punto único donde se arman tablas, repositorios y servicios.
#
# BACKENDS:
#   config.BACKEND == 'json'     → JsonTable (archivos en DATA_DIR)
#   config.BACKEND == 'supabase' → SupabaseTable (API REST alojada)
#
# Los servicios reciben repositorios; no saben qué backend hay detrás.
# ==============================================================================

import logging
from typing import Optional

from storefront.config import BACKEND_SUPABASE, Config

from storefront.repositories import (
    ID_INTEGER,
    ID_UUID,
    ITable,
    JsonTable,
    OrderRepository,
    ProductRepository,
    SettingsRepository,
    SupabaseClient,
    SupabaseTable,
)
from storefront.repositories.order_repository import TABLE_NAME as ORDERS_TABLE
from storefront.repositories.product_repository import TABLE_NAME as PRODUCTS_TABLE
from storefront.repositories.settings_repository import TABLE_NAME as SETTINGS_TABLE

from storefront.services import (
    AdminAuthService,
    CartService,
    CheckoutService,
    OrderService,
    PopupService,
    ProductService,
    ReportService,
)

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Contenedor de dependencias de la aplicación.

    Implementa el patrón Singleton; cada repositorio y servicio se crea la
    primera vez que se pide.

    Uso:
        container = get_container(Config())
        container.product_service.list_catalog()
    """

    _instance: Optional['AppContainer'] = None

    def __new__(cls, config: Config = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config: Config = None):
        if self._initialized:
            return

        self.config = config or Config()
        self._client: Optional[SupabaseClient] = None

        self._product_repo: Optional[ProductRepository] = None
        self._order_repo: Optional[OrderRepository] = None
        self._settings_repo: Optional[SettingsRepository] = None

        self._auth_service: Optional[AdminAuthService] = None
        self._product_service: Optional[ProductService] = None
        self._cart_service: Optional[CartService] = None
        self._checkout_service: Optional[CheckoutService] = None
        self._order_service: Optional[OrderService] = None
        self._report_service: Optional[ReportService] = None
        self._popup_service: Optional[PopupService] = None

        logger.info("Contenedor iniciado con backend '%s'", self.config.BACKEND)
        self._initialized = True

    # =========================================================================
    # TABLAS
    # =========================================================================

    @property
    def uses_hosted_backend(self) -> bool:
        return self.config.BACKEND == BACKEND_SUPABASE

    @property
    def client(self) -> SupabaseClient:
        """Cliente HTTP del backend alojado (compartido por las tablas)."""
        if self._client is None:
            self._client = SupabaseClient(
                self.config.SUPABASE_URL,
                self.config.SUPABASE_ANON_KEY,
                timeout=self.config.BACKEND_TIMEOUT,
            )
        return self._client

    def make_table(self, name: str, id_type: str = ID_INTEGER) -> ITable:
        if self.uses_hosted_backend:
            return SupabaseTable(self.client, name)
        return JsonTable(self.config.DATA_DIR, name, id_type=id_type)

    # =========================================================================
    # REPOSITORIOS
    # =========================================================================

    @property
    def product_repo(self) -> ProductRepository:
        if self._product_repo is None:
            self._product_repo = ProductRepository(self.make_table(PRODUCTS_TABLE))
        return self._product_repo

    @property
    def order_repo(self) -> OrderRepository:
        if self._order_repo is None:
            self._order_repo = OrderRepository(self.make_table(ORDERS_TABLE, ID_UUID))
        return self._order_repo

    @property
    def settings_repo(self) -> SettingsRepository:
        if self._settings_repo is None:
            self._settings_repo = SettingsRepository(self.make_table(SETTINGS_TABLE))
        return self._settings_repo

    # =========================================================================
    # SERVICIOS
    # =========================================================================

    @property
    def auth_service(self) -> AdminAuthService:
        if self._auth_service is None:
            self._auth_service = AdminAuthService(self.config.ADMIN_PASSWORD)
        return self._auth_service

    @property
    def product_service(self) -> ProductService:
        if self._product_service is None:
            self._product_service = ProductService(self.product_repo, self.config.STORE_TIMEZONE)
        return self._product_service

    @property
    def cart_service(self) -> CartService:
        if self._cart_service is None:
            self._cart_service = CartService(self.product_service)
        return self._cart_service

    @property
    def checkout_service(self) -> CheckoutService:
        if self._checkout_service is None:
            self._checkout_service = CheckoutService(
                self.order_repo,
                self.cart_service,
                whatsapp_number=self.config.WHATSAPP_NUMBER,
                store_name=self.config.STORE_NAME,
                copy_email=self.config.ORDER_COPY_EMAIL,
            )
        return self._checkout_service

    @property
    def order_service(self) -> OrderService:
        if self._order_service is None:
            self._order_service = OrderService(self.order_repo, self.auth_service)
        return self._order_service

    @property
    def report_service(self) -> ReportService:
        if self._report_service is None:
            self._report_service = ReportService(self.config.STORE_TIMEZONE)
        return self._report_service

    @property
    def popup_service(self) -> PopupService:
        if self._popup_service is None:
            self._popup_service = PopupService(self.settings_repo)
        return self._popup_service

    # =========================================================================
    # UTILIDADES
    # =========================================================================

    def reset(self) -> None:
        """Descarta todas las instancias (se recrean al pedirlas)."""
        self._client = None
        self._product_repo = None
        self._order_repo = None
        self._settings_repo = None
        self._auth_service = None
        self._product_service = None
        self._cart_service = None
        self._checkout_service = None
        self._order_service = None
        self._report_service = None
        self._popup_service = None

    @classmethod
    def get_instance(cls, config: Config = None) -> 'AppContainer':
        """
        Args:
            config: Configuración (solo se usa en la primera llamada)
        """
        if cls._instance is None:
            return cls(config)
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Elimina la instancia singleton (útil para tests)."""
        if cls._instance is not None:
            cls._instance.reset()
            cls._instance = None


def get_container(config: Config = None) -> AppContainer:
    """Contenedor de dependencias global."""
    return AppContainer.get_instance(config)
