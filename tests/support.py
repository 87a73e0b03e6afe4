from sqlalchemy.orm import sessionmaker

from validapro.database import build_engine, init_db
from validapro.models import Product, Store
from validapro.services.user_service import build_user


def make_engine(database_url="sqlite://"):
    engine = build_engine(database_url)
    init_db(engine)
    return engine


def make_session_factory(engine=None):
    return sessionmaker(
        bind=engine or make_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


def add_user(db, username, role, store_id=None, password="secret"):
    user = build_user(username, password, role, store_id)
    db.add(user)
    db.commit()
    return user


def add_store(db, name="Loja Matriz", address=None):
    store = Store(name=name, address=address)
    db.add(store)
    db.commit()
    return store


def add_product(db, name="Leite Integral 1L", ean="7891000053508", category=None):
    product = Product(name=name, ean=ean, category=category)
    db.add(product)
    db.commit()
    return product
