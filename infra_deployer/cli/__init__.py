"""Command line interface for infra-deployer"""
