import logging
from dataclasses import dataclass

import streamlit as st

import settings
from cart import CartStore
from catalog import PRODUCTS, build_shop_page, trigger_id
from channel import ChangeChannel
from inline_editor import InlineEditorController, ToastRack
from page_model import Page
from search import SuggestionIndex
from storage import FileStorage, MemoryStorage, SupabaseStorage
from sync import SyncBridge
from timers import TimerQueue

logger = logging.getLogger(__name__)


@dataclass
class ShopSession:
    """Everything one browser tab works with, built once and handed to each page."""
    store: CartStore
    bridge: SyncBridge
    timers: TimerQueue
    toasts: ToastRack
    page: Page
    editor: InlineEditorController
    search: SuggestionIndex
    current_page: str | None = None

    def show_page(self, name: str) -> bool:
        """Record the page being drawn; leaving a page drops its timers and toasts."""
        if name == self.current_page:
            return False
        if self.current_page is not None:
            self.timers.cancel_all()
            self.toasts.clear()
        self.current_page = name
        return True

    def pump(self) -> bool:
        """Run due timers and apply changes from other tabs, on this tab's thread."""
        ran = self.timers.run_due()
        synced = self.bridge.apply_pending()
        return bool(ran or synced)


@st.cache_resource(show_spinner=False)
def get_storage():
    backend = settings.storage_backend()
    if backend == "supabase":
        from supabase_client import get_client
        return SupabaseStorage(get_client(), settings.profile_id())
    if backend == "file":
        return FileStorage(settings.storage_path())
    return MemoryStorage()


@st.cache_resource(show_spinner=False)
def get_channel():
    return ChangeChannel()


def build_session(storage, channel, key="cart", products=PRODUCTS, context_id=None, timers=None,
                  deferred_sync=True) -> ShopSession:
    timers = timers or TimerQueue()
    store = CartStore(storage, channel, key=key, context_id=context_id)
    store.load()
    page = build_shop_page(products)
    toasts = ToastRack(timers)
    editor = InlineEditorController(store, page, toasts)
    for p in products:
        editor.bind(trigger_id(p), p["name"])
    search = SuggestionIndex(page, timers)
    search.build_index()
    # Streamlit runs each tab in its own thread, so other tabs only flag changes.
    bridge = SyncBridge(store, channel, deferred=deferred_sync)
    bridge.start()
    return ShopSession(store, bridge, timers, toasts, page, editor, search)


def init_state() -> ShopSession:
    if "shop" not in st.session_state:
        shop = build_session(get_storage(), get_channel(), key=settings.storage_key())
        shop.toasts.on_show = lambda text: st.toast(text)
        st.session_state.shop = shop
        logger.info("Cart session %s started with %d line(s)", shop.store.context_id, len(shop.store))
    if "last_order" not in st.session_state:
        st.session_state.last_order = None
    if "confirm_clear" not in st.session_state:
        st.session_state.confirm_clear = False
    return st.session_state.shop
